"""Tests for coaching prompts and their fallbacks."""

import json
from datetime import date

import pytest

from smartspend.advisor import (
    COACH_FALLBACK,
    MEAL_IDEAS_FALLBACK,
    NO_JUNK_FOOD,
    NO_TRANSACTIONS_ADVICE,
    REPORT_FALLBACK,
    coach_prompt,
    get_coach_advice,
    get_health_alert,
    get_meal_ideas,
    get_monthly_report,
    report_summary,
)
from smartspend.ai import AIBackend
from smartspend.analytics import compute_analysis
from smartspend.models import Transaction


class ScriptedBackend(AIBackend):
    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    async def generate_text(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def _tx(name, amount, day, food_tag=None, is_impulse=False, category=None):
    return Transaction(
        owner_id="u1",
        name=name,
        amount=amount,
        date=day,
        category=category or ("Food" if food_tag else "Shopping"),
        food_tag=food_tag,
        is_impulse=is_impulse,
    )


@pytest.fixture
def transactions():
    return [
        _tx("Pizza", 400, date(2024, 3, 9), food_tag="Junk"),
        _tx("Burger", 250, date(2024, 3, 8), food_tag="Junk"),
        _tx("Salad", 180, date(2024, 3, 7), food_tag="Healthy"),
        _tx("Fries", 120, date(2024, 3, 6), food_tag="Junk"),
        _tx("Headphones", 3000, date(2024, 3, 5), is_impulse=True),
    ]


def test_coach_prompt_uses_recent_transactions(transactions):
    prompt = coach_prompt(transactions, limit=2)
    assert "Pizza: ₹400" in prompt
    assert "Burger: ₹250" in prompt
    assert "Salad" not in prompt


def test_report_summary(transactions):
    summary = report_summary(compute_analysis(transactions, date(2024, 3, 10)))
    assert summary == {
        "totalSpent": "3950.00",
        "unnecessarySpending": "3000.00",
        "junkFoodSpending": "770.00",
        "impulseSpending": "3000.00",
        "topCategory": "Shopping",
    }


class TestCoachAdvice:
    @pytest.mark.asyncio
    async def test_no_transactions(self):
        backend = ScriptedBackend(reply="unused")
        assert await get_coach_advice(backend, []) == NO_TRANSACTIONS_ADVICE
        assert backend.prompts == []

    @pytest.mark.asyncio
    async def test_returns_reply(self, transactions):
        backend = ScriptedBackend(reply="  • Cook more\n• Walk  ")
        assert await get_coach_advice(backend, transactions) == "• Cook more\n• Walk"

    @pytest.mark.asyncio
    async def test_fallback_on_error(self, transactions):
        backend = ScriptedBackend(error=RuntimeError("503"))
        assert await get_coach_advice(backend, transactions) == COACH_FALLBACK

    @pytest.mark.asyncio
    async def test_fallback_on_empty_reply(self, transactions):
        backend = ScriptedBackend(reply="   ")
        assert await get_coach_advice(backend, transactions) == COACH_FALLBACK


class TestHealthAlert:
    @pytest.mark.asyncio
    async def test_alert_when_over_threshold(self, transactions):
        backend = ScriptedBackend(reply="Moderation is key.")
        alert = await get_health_alert(backend, transactions, date(2024, 3, 10))
        assert alert == "Moderation is key."
        assert "3 times in the last 7 days" in backend.prompts[0]

    @pytest.mark.asyncio
    async def test_no_alert_at_threshold(self, transactions):
        backend = ScriptedBackend(reply="unused")
        alert = await get_health_alert(backend, transactions[:2], date(2024, 3, 10))
        assert alert == ""
        assert backend.prompts == []

    @pytest.mark.asyncio
    async def test_old_junk_ignored(self, transactions):
        backend = ScriptedBackend(reply="unused")
        alert = await get_health_alert(backend, transactions, date(2024, 3, 30))
        assert alert == ""

    @pytest.mark.asyncio
    async def test_failure_means_no_alert(self, transactions):
        backend = ScriptedBackend(error=TimeoutError())
        assert await get_health_alert(backend, transactions, date(2024, 3, 10)) == ""


class TestMealIdeas:
    @pytest.mark.asyncio
    async def test_uses_junk_names(self, transactions):
        backend = ScriptedBackend(reply="• Homemade pizza")
        analysis = compute_analysis(transactions, date(2024, 3, 10))
        assert await get_meal_ideas(backend, analysis) == "• Homemade pizza"
        assert "Pizza, Burger, Fries" in backend.prompts[0]

    @pytest.mark.asyncio
    async def test_no_junk_food(self):
        backend = ScriptedBackend(reply="unused")
        analysis = compute_analysis([], date(2024, 3, 10))
        assert await get_meal_ideas(backend, analysis) == NO_JUNK_FOOD

    @pytest.mark.asyncio
    async def test_fallback(self, transactions):
        backend = ScriptedBackend(error=ValueError("no key"))
        analysis = compute_analysis(transactions, date(2024, 3, 10))
        assert await get_meal_ideas(backend, analysis) == MEAL_IDEAS_FALLBACK


class TestMonthlyReport:
    @pytest.mark.asyncio
    async def test_prompt_contains_summary(self, transactions):
        backend = ScriptedBackend(reply="Great month!")
        analysis = compute_analysis(transactions, date(2024, 3, 10))
        assert await get_monthly_report(backend, analysis) == "Great month!"
        assert json.dumps(report_summary(analysis)) in backend.prompts[0]

    @pytest.mark.asyncio
    async def test_fallback(self):
        backend = ScriptedBackend(error=RuntimeError())
        analysis = compute_analysis([], date(2024, 3, 10))
        assert await get_monthly_report(backend, analysis) == REPORT_FALLBACK
