"""Gemini client and prompt templates."""

from .gemini_client import GeminiClient, ModelInvocationError

__all__ = ["GeminiClient", "ModelInvocationError"]
