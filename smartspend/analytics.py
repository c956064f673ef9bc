"""Monthly spending analytics derived from the transaction log."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .models import Transaction


@dataclass
class CategorySlice:
    name: str
    value: float


@dataclass
class DailyPoint:
    day: int
    spending: float = 0.0
    calories: float = 0.0


@dataclass
class Analysis:
    """Aggregates for the calendar month containing the reference date."""

    year: int
    month: int
    total_spent: float = 0.0
    junk_food_spending: float = 0.0
    impulse_spending: float = 0.0
    total_calories: float = 0.0
    category_breakdown: list[CategorySlice] = field(default_factory=list)
    daily_series: list[DailyPoint] = field(default_factory=list)
    month_transactions: list[Transaction] = field(default_factory=list)

    @property
    def unnecessary_spending(self) -> float:
        """Alias of impulse_spending."""
        return self.impulse_spending

    @property
    def unnecessary_pct(self) -> float:
        return percentage_of_total(self.unnecessary_spending, self.total_spent)

    @property
    def top_category(self) -> str:
        if not self.category_breakdown:
            return "N/A"
        return max(self.category_breakdown, key=lambda s: s.value).name

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "month": self.month,
            "totalSpent": self.total_spent,
            "junkFoodSpending": self.junk_food_spending,
            "impulseSpending": self.impulse_spending,
            "unnecessarySpending": self.unnecessary_spending,
            "totalCalories": self.total_calories,
            "pieData": [
                {"name": s.name, "value": s.value} for s in self.category_breakdown
            ],
            "dailySeries": [
                {"day": p.day, "spending": p.spending, "calories": p.calories}
                for p in self.daily_series
            ],
        }


def percentage_of_total(part: float, total: float) -> float:
    """Return part as a percentage of total, 0.0 for a zero total."""
    if total <= 0:
        return 0.0
    return part / total * 100


def _as_date(now: date | datetime) -> date:
    return now.date() if isinstance(now, datetime) else now


def compute_analysis(
    transactions: list[Transaction], now: date | datetime
) -> Analysis:
    """Compute this month's totals, category breakdown and daily series."""
    today = _as_date(now)
    days_in_month = calendar.monthrange(today.year, today.month)[1]

    month_tx = [
        t
        for t in transactions
        if t.date is not None
        and t.date.year == today.year
        and t.date.month == today.month
    ]

    analysis = Analysis(year=today.year, month=today.month)
    analysis.daily_series = [DailyPoint(day=d) for d in range(1, days_in_month + 1)]

    by_category: dict[str, float] = {}
    for t in month_tx:
        analysis.total_spent += t.amount
        analysis.total_calories += t.estimated_calories
        if t.is_junk:
            analysis.junk_food_spending += t.amount
        if t.is_impulse:
            analysis.impulse_spending += t.amount
        by_category[t.category] = by_category.get(t.category, 0.0) + t.amount

        point = analysis.daily_series[t.date.day - 1]
        point.spending += t.amount
        point.calories += t.estimated_calories

    analysis.category_breakdown = [
        CategorySlice(name=name, value=value) for name, value in by_category.items()
    ]
    analysis.month_transactions = sorted(
        month_tx, key=lambda t: t.date, reverse=True
    )
    return analysis


def junk_food_in_window(
    transactions: list[Transaction], now: date | datetime, days: int = 7
) -> list[Transaction]:
    """Return junk-tagged transactions dated after ``now - days``."""
    cutoff = _as_date(now) - timedelta(days=days)
    return [
        t for t in transactions if t.is_junk and t.date is not None and t.date > cutoff
    ]
