"""AI backend base class, response parsing, and factory."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..models import CATEGORIES, Classification

if TYPE_CHECKING:
    from ..config import SmartSpendConfig

logger = logging.getLogger(__name__)

CLASSIFY_PROMPT = """\
Analyze the expense: "{description}" for amount {amount}.
Return ONLY a clean JSON object, with no other text or markdown, with fields:
  "category": one of [{categories}],
  "isImpulse": boolean, true if this is likely an impulse purchase
      (non-essential high-cost items, frequent small unnecessary purchases),
  "foodTag": if category is Food, one of ["Junk", "Healthy", "Neutral"], else null,
  "estimatedCalories": a rough calorie estimate for food, otherwise 0,
  "suggestion": a short, actionable tip for saving money or being healthier.

Example for "McDonald's 250":
{{"category": "Food", "foodTag": "Junk", "estimatedCalories": 500,
  "isImpulse": true,
  "suggestion": "Consider a home-cooked meal next time to save money and calories."}}
"""


def build_classify_prompt(description: str, amount: float) -> str:
    return CLASSIFY_PROMPT.format(
        description=description,
        amount=amount,
        categories=", ".join(f'"{c}"' for c in CATEGORIES),
    )


class AIBackend(ABC):
    """Abstract base for the generative-AI collaborator."""

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        """Send a prompt and return the model's text reply."""
        ...

    async def classify(self, description: str, amount: float) -> Classification:
        """Ask the model to label a single expense.

        Raises whatever the transport raises, or ValueError when the reply
        is not a JSON object.
        """
        text = await self.generate_text(build_classify_prompt(description, amount))
        return Classification.from_dict(parse_classification(text))


def _strip_fences(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    return cleaned.strip()


def parse_classification(text: str) -> dict:
    """Decode the JSON object from a model reply, tolerating ``` fences."""
    try:
        data = json.loads(_strip_fences(text or ""))
    except json.JSONDecodeError as e:
        raise ValueError(f"AI reply is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"AI reply is not a JSON object: {type(data).__name__}")
    return data


async def classify_or_default(
    backend: AIBackend, description: str, amount: float
) -> Classification:
    """Classify once; on any failure log it and return the default labels."""
    try:
        return await backend.classify(description, amount)
    except Exception:
        logger.exception("Classification failed for %r, using defaults", description)
        return Classification.default()


def create_backend(config: SmartSpendConfig) -> AIBackend:
    """Create an AI backend based on configuration."""
    backend_name = config.ai.backend

    match backend_name:
        case "gemini":
            from .gemini import GeminiBackend

            return GeminiBackend(
                api_key=config.ai.gemini.api_key,
                model=config.ai.gemini.model,
            )
        case "claude":
            from .claude import ClaudeBackend

            return ClaudeBackend(
                api_key=config.ai.claude.api_key,
                model=config.ai.claude.model,
            )
        case _:
            raise ValueError(
                f"Unknown AI backend: {backend_name!r} (choose gemini or claude)"
            )
