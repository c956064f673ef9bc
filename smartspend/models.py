"""Data models for transactions, classifications and user profiles."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields
from datetime import date, datetime

CATEGORIES = (
    "Food",
    "Travel",
    "Shopping",
    "Bills",
    "Entertainment",
    "Health",
    "Other",
)

FOOD_TAGS = ("Junk", "Healthy", "Neutral")

DEFAULT_SUGGESTION = "Could not analyze transaction. Please categorize manually."


def _to_float(value) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if result != result:  # NaN
        return 0.0
    return result


def _to_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def parse_date(value) -> date | None:
    """Coerce an ISO string, date or datetime into a date.

    Returns None for anything that cannot be read as a calendar day.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None
    return None


def _parse_timestamp(value) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None
    return None


@dataclass
class Classification:
    """AI-assigned labels for a single expense."""

    category: str = "Other"
    food_tag: str | None = None
    estimated_calories: float = 0.0
    is_impulse: bool = False
    suggestion: str = DEFAULT_SUGGESTION

    @classmethod
    def default(cls) -> Classification:
        """Classification used when the AI could not be reached."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Classification:
        """Normalize a raw AI payload.

        Accepts both ``foodTag`` and ``foodType`` for the food tag. Unknown
        categories collapse to ``Other`` and a food tag is only kept for
        ``Food`` entries.
        """
        category = data.get("category")
        if category not in CATEGORIES:
            category = "Other"

        food_tag = data.get("foodTag", data.get("foodType"))
        if category != "Food" or food_tag not in FOOD_TAGS:
            food_tag = None

        calories = max(0.0, _to_float(data.get("estimatedCalories", 0)))
        suggestion = data.get("suggestion") or ""

        return cls(
            category=category,
            food_tag=food_tag,
            estimated_calories=calories,
            is_impulse=_to_bool(data.get("isImpulse", False)),
            suggestion=str(suggestion),
        )


@dataclass
class Transaction:
    """A single logged expense. Records are append-only."""

    owner_id: str
    name: str
    amount: float
    date: date | None
    category: str = "Other"
    food_tag: str | None = None
    is_impulse: bool = False
    estimated_calories: float = 0.0
    suggestion: str = ""
    id: int | None = None
    created_at: datetime | None = None

    @property
    def is_junk(self) -> bool:
        return self.food_tag == "Junk"

    @classmethod
    def create(
        cls,
        owner_id: str,
        name: str,
        amount: float,
        on: date,
        classification: Classification,
    ) -> Transaction:
        """Build an unsaved transaction from user input and its labels."""
        return cls(
            owner_id=owner_id,
            name=name,
            amount=float(amount),
            date=on,
            category=classification.category,
            food_tag=classification.food_tag,
            is_impulse=classification.is_impulse,
            estimated_calories=classification.estimated_calories,
            suggestion=classification.suggestion,
        )

    @classmethod
    def from_row(cls, row) -> Transaction:
        """Build a transaction from a database row or plain dict.

        Malformed amounts become 0 and unreadable dates become None so a
        single bad record never breaks the analytics.
        """
        data = dict(row)
        return cls(
            id=data.get("id"),
            owner_id=data.get("owner_id", ""),
            name=data.get("name") or "",
            amount=_to_float(data.get("amount")),
            date=parse_date(data.get("date")),
            category=data.get("category") or "Other",
            food_tag=data.get("food_tag"),
            is_impulse=_to_bool(data.get("is_impulse", False)),
            estimated_calories=_to_float(data.get("estimated_calories")),
            suggestion=data.get("suggestion") or "",
            created_at=_parse_timestamp(data.get("created_at")),
        )

    def to_dict(self) -> dict:
        d = asdict(self)
        d["date"] = self.date.isoformat() if self.date else None
        d["created_at"] = self.created_at.isoformat() if self.created_at else None
        return d


@dataclass
class UserProfile:
    """Per-user spending thresholds."""

    junk_food_limit: float = 2000.0
    impulse_spending_limit: float = 10000.0
    savings_goal: float = 5000.0

    def update(self, **partial) -> UserProfile:
        """Return a copy with the given thresholds replaced.

        Raises:
            ValueError: On an unknown field or a non-positive value.
        """
        known = {f.name for f in fields(self)}
        values = asdict(self)
        for key, value in partial.items():
            if key not in known:
                raise ValueError(f"Unknown profile setting: {key!r}")
            number = _to_float(value)
            if not math.isfinite(number) or number <= 0:
                raise ValueError(f"{key} must be a positive number, got {value!r}")
            values[key] = number
        return UserProfile(**values)


@dataclass
class Streaks:
    """Consecutive clean days for the two tracked behaviors."""

    no_junk_food: int = 0
    no_impulse_spending: int = 0
