"""Badges, goal progress and challenges.

Everything here is re-evaluated from current state on every call; nothing
is stored, so a badge disappears again as soon as its condition stops
holding.
"""

from __future__ import annotations

from dataclasses import dataclass

from .analytics import Analysis
from .models import Streaks, UserProfile

HEALTHY_WEEK_DAYS = 7
MINDFUL_MONTH_DAYS = 30
SUPER_SAVER_RATIO = 0.10


@dataclass
class Badge:
    name: str
    icon: str


@dataclass
class Challenge:
    name: str
    icon: str
    description: str
    completed: bool


@dataclass
class GoalProgress:
    """Spending versus the user's monthly thresholds, in percent."""

    junk_food_pct: float = 0.0
    impulse_pct: float = 0.0
    savings_pct: float = 0.0
    remaining_savings: float = 0.0
    junk_over_limit: bool = False
    impulse_over_limit: bool = False

    @staticmethod
    def clamped(pct: float) -> float:
        """Progress bar width, limited to 0..100."""
        return min(max(pct, 0.0), 100.0)


def _ratio_pct(value: float, limit: float) -> float:
    if limit <= 0:
        return 0.0
    return value / limit * 100


def evaluate_badges(streaks: Streaks, analysis: Analysis) -> list[Badge]:
    badges: list[Badge] = []
    if streaks.no_junk_food >= HEALTHY_WEEK_DAYS:
        badges.append(Badge(name="Healthy Week", icon="🥗"))
    if streaks.no_impulse_spending >= MINDFUL_MONTH_DAYS:
        badges.append(Badge(name="Mindful Month", icon="🧠"))
    if (
        analysis.total_spent > 0
        and analysis.unnecessary_spending / analysis.total_spent < SUPER_SAVER_RATIO
    ):
        badges.append(Badge(name="Super Saver", icon="💰"))
    return badges


def compute_goal_progress(analysis: Analysis, profile: UserProfile) -> GoalProgress:
    goal = profile.savings_goal
    total = analysis.total_spent
    if goal > 0 and total < goal:
        savings_pct = (goal - total) / goal * 100
    else:
        savings_pct = 0.0

    return GoalProgress(
        junk_food_pct=_ratio_pct(analysis.junk_food_spending, profile.junk_food_limit),
        impulse_pct=_ratio_pct(
            analysis.impulse_spending, profile.impulse_spending_limit
        ),
        savings_pct=savings_pct,
        remaining_savings=max(0.0, goal - total),
        junk_over_limit=analysis.junk_food_spending > profile.junk_food_limit,
        impulse_over_limit=analysis.impulse_spending > profile.impulse_spending_limit,
    )


def evaluate_challenges(streaks: Streaks, progress: GoalProgress) -> list[Challenge]:
    return [
        Challenge(
            name="1 Week No Late-Night Orders",
            icon="🌙",
            description="Avoid food orders after 10 PM for 7 days straight.",
            completed=streaks.no_junk_food >= 7,
        ),
        Challenge(
            name="Impulse-Free Weekend",
            icon="🛍️",
            description="Make no impulse purchases from Friday to Sunday.",
            completed=streaks.no_impulse_spending >= 3,
        ),
        Challenge(
            name="Under Budget Hero",
            icon="🎯",
            description="Keep your total spending below your monthly savings goal.",
            completed=progress.savings_pct >= 100,
        ),
    ]
