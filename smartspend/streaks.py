"""Behavioral streak counters (days without junk food / impulse buys)."""

from __future__ import annotations

from datetime import date, datetime

from .models import Streaks, Transaction


def _days_since(then: date, today: date) -> int:
    return max(0, (today - then).days)


def compute_streaks(
    transactions: list[Transaction], now: date | datetime
) -> Streaks | None:
    """Count whole days since the last junk-food and impulse purchase.

    A behavior that never occurred counts from the earliest transaction.
    Returns None when there is nothing dated to look at, in which case the
    caller keeps whatever streaks it already had.
    """
    today = now.date() if isinstance(now, datetime) else now

    dated = sorted(
        (t for t in transactions if t.date is not None), key=lambda t: t.date
    )
    if not dated:
        return None

    last_junk: date | None = None
    last_impulse: date | None = None
    for t in dated:
        if t.is_junk:
            last_junk = t.date
        if t.is_impulse:
            last_impulse = t.date

    earliest = dated[0].date
    return Streaks(
        no_junk_food=_days_since(last_junk or earliest, today),
        no_impulse_spending=_days_since(last_impulse or earliest, today),
    )
