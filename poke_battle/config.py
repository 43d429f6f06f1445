"""Environment-driven settings for the battle servers and CLI."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_POKEAPI_BASE_URL = "https://pokeapi.co/api/v2/"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
DEBUG_VALUES = {"true", "pokemon-mcp"}
LOG_FORMAT = "[%(asctime)s] [poke-battle] %(message)s"


class ConfigError(RuntimeError):
    """Raised when required configuration is missing."""


@dataclass(frozen=True, slots=True)
class Settings:
    gemini_api_key: str
    pokeapi_base_url: str = DEFAULT_POKEAPI_BASE_URL
    gemini_model: str = DEFAULT_GEMINI_MODEL
    debug: bool = False
    web_host: str = "127.0.0.1"
    web_port: int = 3001


def load_config(*, load_env_files: bool = True) -> Settings:
    """Build ``Settings`` from the environment, failing without a Gemini key."""

    if load_env_files:
        # .env first, then .env.local overrides it.
        load_dotenv()
        load_dotenv(".env.local", override=True)

    api_key = os.getenv("GEMINI_API_KEY", "").strip()
    if not api_key:
        raise ConfigError("GEMINI_API_KEY environment variable is required")

    port = os.getenv("PORT") or "3001"
    try:
        web_port = int(port)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got '{port}'") from None

    return Settings(
        gemini_api_key=api_key,
        pokeapi_base_url=os.getenv("POKEAPI_BASE_URL") or DEFAULT_POKEAPI_BASE_URL,
        gemini_model=os.getenv("GEMINI_MODEL") or DEFAULT_GEMINI_MODEL,
        debug=os.getenv("DEBUG", "").lower() in DEBUG_VALUES,
        web_host=os.getenv("HOST") or "127.0.0.1",
        web_port=web_port,
    )


def configure_logging(debug: bool = False) -> None:
    """Send package logs to stderr; stdout stays reserved for the stdio transport."""

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger("poke_battle")
    root.handlers[:] = [handler]
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    root.propagate = False
