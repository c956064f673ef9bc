"""Gemini API backend."""

from __future__ import annotations

from . import AIBackend


class GeminiBackend(AIBackend):
    """Classify expenses and write advice with Google Gemini."""

    def __init__(self, api_key: str = "", model: str = "gemini-2.0-flash") -> None:
        self._api_key = api_key
        self._model = model

    async def generate_text(self, prompt: str) -> str:
        if not self._api_key:
            raise ValueError(
                "Gemini API key is not set. "
                "Check the config file or the GEMINI_API_KEY environment variable."
            )

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "google-generativeai SDK is required: pip install google-generativeai"
            ) from None

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model)

        response = await model.generate_content_async(prompt)
        return response.text
