"""Tests for badges, goal progress and challenges."""

from datetime import date

import pytest

from smartspend.analytics import Analysis
from smartspend.goals import (
    GoalProgress,
    compute_goal_progress,
    evaluate_badges,
    evaluate_challenges,
)
from smartspend.models import Streaks, UserProfile


def _analysis(total=0.0, junk=0.0, impulse=0.0) -> Analysis:
    return Analysis(
        year=2024,
        month=3,
        total_spent=total,
        junk_food_spending=junk,
        impulse_spending=impulse,
    )


class TestBadges:
    def test_no_badges(self):
        assert evaluate_badges(Streaks(), _analysis()) == []

    def test_healthy_week_threshold(self):
        names = [b.name for b in evaluate_badges(Streaks(no_junk_food=7), _analysis())]
        assert names == ["Healthy Week"]
        assert evaluate_badges(Streaks(no_junk_food=6), _analysis()) == []

    def test_mindful_month_threshold(self):
        badges = evaluate_badges(Streaks(no_impulse_spending=30), _analysis())
        assert [b.name for b in badges] == ["Mindful Month"]
        assert evaluate_badges(Streaks(no_impulse_spending=29), _analysis()) == []

    def test_super_saver(self):
        badges = evaluate_badges(Streaks(), _analysis(total=1000, impulse=99))
        assert [b.name for b in badges] == ["Super Saver"]

    def test_super_saver_lost_at_ten_percent(self):
        assert evaluate_badges(Streaks(), _analysis(total=1000, impulse=100)) == []

    def test_super_saver_needs_spending(self):
        assert evaluate_badges(Streaks(), _analysis(total=0)) == []

    def test_all_badges(self):
        badges = evaluate_badges(
            Streaks(no_junk_food=10, no_impulse_spending=45), _analysis(total=500)
        )
        assert {b.name for b in badges} == {"Healthy Week", "Mindful Month", "Super Saver"}


class TestGoalProgress:
    def test_percentages(self):
        profile = UserProfile(
            junk_food_limit=2000, impulse_spending_limit=10000, savings_goal=5000
        )
        p = compute_goal_progress(_analysis(total=1000, junk=500, impulse=2500), profile)
        assert p.junk_food_pct == 25
        assert p.impulse_pct == 25
        assert p.savings_pct == 80
        assert p.remaining_savings == 4000
        assert not p.junk_over_limit
        assert not p.impulse_over_limit

    def test_over_budget(self):
        profile = UserProfile(junk_food_limit=100, impulse_spending_limit=100, savings_goal=50)
        p = compute_goal_progress(_analysis(total=300, junk=150, impulse=101), profile)
        assert p.junk_over_limit
        assert p.impulse_over_limit
        assert p.savings_pct == 0
        assert p.remaining_savings == 0
        assert GoalProgress.clamped(p.junk_food_pct) == 100

    def test_zero_limits_do_not_divide(self):
        profile = UserProfile(junk_food_limit=0, impulse_spending_limit=0, savings_goal=0)
        p = compute_goal_progress(_analysis(total=10, junk=10, impulse=10), profile)
        assert p.junk_food_pct == 0
        assert p.impulse_pct == 0
        assert p.savings_pct == 0

    def test_clamped(self):
        assert GoalProgress.clamped(150) == 100
        assert GoalProgress.clamped(-5) == 0
        assert GoalProgress.clamped(42.5) == pytest.approx(42.5)


def test_challenges():
    progress = compute_goal_progress(_analysis(total=0), UserProfile())
    challenges = evaluate_challenges(
        Streaks(no_junk_food=7, no_impulse_spending=2), progress
    )
    status = {c.name: c.completed for c in challenges}
    assert status == {
        "1 Week No Late-Night Orders": True,
        "Impulse-Free Weekend": False,
        "Under Budget Hero": True,
    }
