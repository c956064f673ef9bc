"""Per-user session tying the store, the AI backend and the engines together."""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import dataclass
from datetime import date
from typing import Callable

from .ai import AIBackend, classify_or_default
from .analytics import Analysis, compute_analysis
from .db import ProfileStore, TransactionStore
from .goals import (
    Badge,
    Challenge,
    GoalProgress,
    compute_goal_progress,
    evaluate_badges,
    evaluate_challenges,
)
from .models import Streaks, Transaction, UserProfile
from .streaks import compute_streaks

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    message: str
    type: str = "success"  # success | error


class Tracker:
    """One user's view of their transaction log.

    Derived state (analysis, streaks) is recomputed from the log on every
    change notification. Streaks are written back to the profile as a cache
    but never read back once the log has been loaded.
    """

    def __init__(
        self,
        store: TransactionStore,
        profiles: ProfileStore,
        backend: AIBackend,
        owner_id: str,
        *,
        defaults: UserProfile | None = None,
        email: str = "",
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._profiles = profiles
        self._backend = backend
        self._owner_id = owner_id
        self._defaults = defaults or UserProfile()
        self._email = email
        self._clock = clock
        self._unsubscribe: Callable[[], None] | None = None

        self.profile: UserProfile | None = None
        self.transactions: list[Transaction] = []
        self.streaks = Streaks()
        self.analysis: Analysis = compute_analysis([], clock())
        self.notifications: deque[Notification] = deque(maxlen=20)
        self.busy = False

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def backend(self) -> AIBackend:
        return self._backend

    def open(self) -> None:
        """Load the profile and start listening for transaction changes."""
        self.profile = self._profiles.get_or_create_profile(
            self._owner_id, self._defaults, email=self._email
        )
        self.streaks = self._profiles.get_cached_streaks(self._owner_id)
        self._unsubscribe = self._store.subscribe(self._owner_id, self._on_change)

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> Tracker:
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _on_change(self, transactions: list[Transaction]) -> None:
        now = self._clock()
        self.transactions = transactions
        self.analysis = compute_analysis(transactions, now)
        streaks = compute_streaks(transactions, now)
        if streaks is not None:
            self.streaks = streaks
            self._profiles.save_streaks(self._owner_id, streaks)
        logger.debug(
            "Recomputed %d transactions for %s: %s",
            len(transactions),
            self._owner_id,
            self.streaks,
        )

    def notify(self, message: str, type: str = "success") -> None:
        self.notifications.append(Notification(message=message, type=type))

    async def add_transaction(
        self, name: str, amount: float, on: date | None = None
    ) -> Transaction:
        """Classify an expense and append it to the log.

        Classification failures fall back to default labels; the write
        always goes ahead.

        Raises:
            ValueError: If the name is blank or the amount is not a positive
                finite number.
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("Transaction name must not be empty")
        amount = float(amount)
        if not math.isfinite(amount) or amount <= 0:
            raise ValueError(f"Amount must be positive, got {amount}")

        self.busy = True
        try:
            labels = await classify_or_default(self._backend, name, amount)
        finally:
            self.busy = False

        tx = Transaction.create(
            self._owner_id, name, amount, on or self._clock(), labels
        )
        stored = self._store.append(tx)
        logger.info("Added transaction %s (%s, %.2f)", stored.id, name, amount)
        self.notify(f'Added "{name}"! AI Insight: {labels.suggestion}')
        return stored

    def update_settings(self, **partial) -> bool:
        """Persist new thresholds; report the outcome as a notification."""
        try:
            self.profile = self._profiles.update_profile(self._owner_id, **partial)
        except (KeyError, ValueError) as e:
            logger.warning("Failed to save settings for %s: %s", self._owner_id, e)
            self.notify(f"Failed to save settings: {e}", "error")
            return False
        self.notify("Settings saved successfully!")
        return True

    @property
    def badges(self) -> list[Badge]:
        return evaluate_badges(self.streaks, self.analysis)

    @property
    def goal_progress(self) -> GoalProgress:
        return compute_goal_progress(self.analysis, self.profile or self._defaults)

    @property
    def challenges(self) -> list[Challenge]:
        return evaluate_challenges(self.streaks, self.goal_progress)
