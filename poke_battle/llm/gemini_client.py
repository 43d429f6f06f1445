"""Thin async wrapper around Google's Generative AI Gemini client."""

from __future__ import annotations

import logging
import os
from typing import Optional, Sequence

import google.generativeai as genai

from ..models import SimplifiedPokemon
from .prompts import build_analysis_prompt, build_battle_prompt, build_comparison_prompt

logger = logging.getLogger(__name__)


class ModelInvocationError(RuntimeError):
    """Raised when a Gemini call fails, times out or returns no text."""

    def __init__(self, message: str, *, error_type: str = "Unknown") -> None:
        super().__init__(message)
        self.error_type = error_type


class GeminiClient:
    """Convenience client for Gemini battle, analysis and comparison prompts."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: str = "gemini-2.5-flash",
    ) -> None:
        api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise RuntimeError("Gemini API key is required")
        genai.configure(api_key=api_key)
        self.model_name = model
        self.model = genai.GenerativeModel(model)

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the completion text."""

        logger.debug("Gemini prompt (%d chars): %s...", len(prompt), prompt[:200])
        try:
            response = await self.model.generate_content_async(prompt)
            text = response.text
        except Exception as exc:
            _log_failure(exc)
            error_type = type(exc).__name__
            raise ModelInvocationError(
                f"Gemini API failed: {exc} ({error_type})", error_type=error_type
            ) from exc
        if not text or not text.strip():
            raise ModelInvocationError("Gemini API returned an empty response", error_type="EmptyResponse")
        logger.debug("Gemini response (%d chars): %s...", len(text), text[:300])
        return text

    async def simulate_battle(
        self, pokemon1: SimplifiedPokemon, pokemon2: SimplifiedPokemon
    ) -> str:
        logger.debug("Simulating battle %s vs %s", pokemon1.name, pokemon2.name)
        return await self.generate(build_battle_prompt(pokemon1, pokemon2))

    async def analyze_pokemon(self, pokemon: SimplifiedPokemon) -> str:
        return await self.generate(build_analysis_prompt(pokemon))

    async def compare_pokemon(self, pokemon_list: Sequence[SimplifiedPokemon]) -> str:
        if len(pokemon_list) < 2:
            raise ValueError("At least 2 Pokemon are required for comparison")
        return await self.generate(build_comparison_prompt(pokemon_list))


def _log_failure(exc: Exception) -> None:
    message = str(exc)
    lowered = message.lower()
    logger.error("Gemini API error (%s): %s", type(exc).__name__, message)
    if "api key" in lowered:
        logger.error("API key issue: check that GEMINI_API_KEY is valid")
    if "quota" in lowered:
        logger.error("Quota issue: Gemini API quota exceeded")
    if "network" in lowered or "connect" in lowered:
        logger.error("Network issue: check internet connection")
