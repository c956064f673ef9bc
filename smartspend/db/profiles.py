"""Per-user settings document and cached streak counters."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from ..models import Streaks, UserProfile
from .schema import ensure_schema


class ProfileStore:
    """Manages the user_profiles table."""

    def __init__(
        self, db_path: str | Path = "~/.config/smartspend/smartspend.db"
    ) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get_or_create_profile(
        self, owner_id: str, defaults: UserProfile, *, email: str = ""
    ) -> UserProfile:
        """Return the owner's profile, creating it from defaults on first use."""
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM user_profiles WHERE owner_id = ?", (owner_id,)
        ).fetchone()
        if row is None:
            conn.execute(
                """INSERT INTO user_profiles
                   (owner_id, email, display_name, junk_food_limit,
                    impulse_spending_limit, savings_goal)
                   VALUES (?, ?, ?, ?, ?, ?)""",
                (
                    owner_id,
                    email,
                    email.split("@")[0] if email else owner_id,
                    defaults.junk_food_limit,
                    defaults.impulse_spending_limit,
                    defaults.savings_goal,
                ),
            )
            conn.commit()
            return UserProfile(
                junk_food_limit=defaults.junk_food_limit,
                impulse_spending_limit=defaults.impulse_spending_limit,
                savings_goal=defaults.savings_goal,
            )
        return _profile_from_row(row)

    def get_profile(self, owner_id: str) -> UserProfile | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT * FROM user_profiles WHERE owner_id = ?", (owner_id,)
        ).fetchone()
        return _profile_from_row(row) if row else None

    def update_profile(self, owner_id: str, **partial) -> UserProfile:
        """Merge new thresholds into an existing profile.

        Raises:
            KeyError: If the owner has no profile yet.
            ValueError: If a field is unknown or not positive.
        """
        current = self.get_profile(owner_id)
        if current is None:
            raise KeyError(f"No profile for owner {owner_id!r}")
        updated = current.update(**partial)

        conn = self._get_conn()
        conn.execute(
            """UPDATE user_profiles
               SET junk_food_limit = ?,
                   impulse_spending_limit = ?,
                   savings_goal = ?,
                   updated_at = datetime('now', 'localtime')
               WHERE owner_id = ?""",
            (
                updated.junk_food_limit,
                updated.impulse_spending_limit,
                updated.savings_goal,
                owner_id,
            ),
        )
        conn.commit()
        return updated

    def save_streaks(self, owner_id: str, streaks: Streaks) -> None:
        """Cache the last computed streaks. Never read back as authoritative."""
        conn = self._get_conn()
        conn.execute(
            """UPDATE user_profiles
               SET streak_no_junk_food = ?,
                   streak_no_impulse_spending = ?,
                   updated_at = datetime('now', 'localtime')
               WHERE owner_id = ?""",
            (streaks.no_junk_food, streaks.no_impulse_spending, owner_id),
        )
        conn.commit()

    def get_cached_streaks(self, owner_id: str) -> Streaks:
        conn = self._get_conn()
        row = conn.execute(
            """SELECT streak_no_junk_food, streak_no_impulse_spending
               FROM user_profiles WHERE owner_id = ?""",
            (owner_id,),
        ).fetchone()
        if row is None:
            return Streaks()
        return Streaks(
            no_junk_food=row["streak_no_junk_food"],
            no_impulse_spending=row["streak_no_impulse_spending"],
        )

    def owners(self) -> list[str]:
        """Return every owner id that has a profile."""
        conn = self._get_conn()
        rows = conn.execute(
            "SELECT owner_id FROM user_profiles ORDER BY owner_id"
        ).fetchall()
        return [r["owner_id"] for r in rows]


def _profile_from_row(row) -> UserProfile:
    return UserProfile(
        junk_food_limit=row["junk_food_limit"],
        impulse_spending_limit=row["impulse_spending_limit"],
        savings_goal=row["savings_goal"],
    )
