"""Prompts and fallbacks for AI coaching, alerts, meal ideas and reports."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime

from .ai import AIBackend
from .analytics import Analysis, junk_food_in_window
from .models import Transaction

logger = logging.getLogger(__name__)

NO_TRANSACTIONS_ADVICE = "Add your first transaction to get personalized savings tips!"
COACH_FALLBACK = "Could not generate advice right now. Please check back later."
NO_JUNK_FOOD = "No junk food transactions found to analyze!"
MEAL_IDEAS_FALLBACK = "Could not generate meal ideas right now. Please try again later."
REPORT_FALLBACK = "Could not generate your monthly report right now. Please try again later."


def coach_prompt(transactions: list[Transaction], limit: int = 10) -> str:
    recent = ", ".join(f"{t.name}: ₹{t.amount:g}" for t in transactions[:limit])
    return (
        f"Based on these recent transactions [{recent}], act as a friendly "
        "financial coach. Provide 3 specific, actionable tips to help the user "
        "save money. Format the response as a single string with each tip on a "
        'new line, starting with a bullet point (e.g., "• Tip 1...\\n• Tip 2...").'
    )


def health_alert_prompt(junk_count: int, days: int = 7) -> str:
    return (
        f"A user has eaten junk food {junk_count} times in the last {days} days. "
        "Write a gentle, non-judgmental alert (2-3 sentences) encouraging them to "
        "consider healthier options for their next meal. Mention that moderation "
        "is key to a healthy lifestyle."
    )


def meal_ideas_prompt(junk_foods: list[str]) -> str:
    return (
        f"A user frequently eats the following junk foods: {', '.join(junk_foods)}. "
        "Suggest 3 healthier and budget-friendly meal alternatives they could make "
        "or buy. For each suggestion, give a name and a one-sentence description. "
        "Format as a single string with each suggestion on a new line, starting "
        "with a bullet point."
    )


def report_summary(analysis: Analysis) -> dict:
    return {
        "totalSpent": f"{analysis.total_spent:.2f}",
        "unnecessarySpending": f"{analysis.unnecessary_spending:.2f}",
        "junkFoodSpending": f"{analysis.junk_food_spending:.2f}",
        "impulseSpending": f"{analysis.impulse_spending:.2f}",
        "topCategory": analysis.top_category,
    }


def report_prompt(analysis: Analysis) -> str:
    return (
        "Here is a user's spending summary for the month: "
        f"{json.dumps(report_summary(analysis))}. Act as a positive and "
        "motivational financial analyst. Write a short summary report (3-4 "
        "sentences) of their progress. Highlight one positive achievement and "
        "suggest one key area to focus on for next month. Format it as a "
        "friendly, encouraging paragraph."
    )


async def _generate_or(backend: AIBackend, prompt: str, fallback: str) -> str:
    try:
        text = await backend.generate_text(prompt)
    except Exception:
        logger.exception("AI text generation failed")
        return fallback
    if not text or not text.strip():
        logger.warning("AI returned an empty reply")
        return fallback
    return text.strip()


async def get_coach_advice(
    backend: AIBackend, transactions: list[Transaction], limit: int = 10
) -> str:
    """Savings tips based on the most recent transactions."""
    if not transactions:
        return NO_TRANSACTIONS_ADVICE
    return await _generate_or(backend, coach_prompt(transactions, limit), COACH_FALLBACK)


async def get_health_alert(
    backend: AIBackend,
    transactions: list[Transaction],
    now: date | datetime,
    *,
    window_days: int = 7,
    threshold: int = 2,
) -> str:
    """A gentle nudge when junk food shows up too often this week.

    Returns an empty string when no alert is due or the AI call fails.
    """
    junk = junk_food_in_window(transactions, now, days=window_days)
    if len(junk) <= threshold:
        return ""
    return await _generate_or(
        backend, health_alert_prompt(len(junk), window_days), ""
    )


async def get_meal_ideas(backend: AIBackend, analysis: Analysis) -> str:
    names = [t.name for t in analysis.month_transactions if t.is_junk][:5]
    if not names:
        return NO_JUNK_FOOD
    return await _generate_or(backend, meal_ideas_prompt(names), MEAL_IDEAS_FALLBACK)


async def get_monthly_report(backend: AIBackend, analysis: Analysis) -> str:
    return await _generate_or(backend, report_prompt(analysis), REPORT_FALLBACK)
