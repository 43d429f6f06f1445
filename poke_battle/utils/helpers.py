"""Input sanitizing, name formatting and retry helpers."""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_ALLOWED = re.compile(r"[^a-z0-9\-]")
_NAME_PATTERN = re.compile(r"^[a-z\-]+$")


class ValidationError(ValueError):
    """Raised when caller input cannot be used as a Pokemon identifier."""


@dataclass(frozen=True, slots=True)
class IdentifierCheck:
    is_valid: bool
    sanitized: str

    @property
    def is_numeric(self) -> bool:
        return self.sanitized.isdigit()


def sanitize_input(value: str) -> str:
    return _ALLOWED.sub("", value.strip().lower())


def validate_identifier(identifier: str) -> IdentifierCheck:
    """Sanitize ``identifier`` and report whether it names a Pokemon or dex number."""

    sanitized = sanitize_input(identifier)
    is_valid = bool(sanitized) and (
        sanitized.isdigit() or bool(_NAME_PATTERN.match(sanitized))
    )
    return IdentifierCheck(is_valid=is_valid, sanitized=sanitized)


def require_identifier(identifier: str) -> str:
    check = validate_identifier(identifier)
    if not check.is_valid:
        raise ValidationError(
            f'Invalid Pokemon identifier: "{identifier}". '
            "Please provide a valid Pokemon name or Pokedex number."
        )
    return check.sanitized


def capitalize_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def format_pokemon_name(name: str) -> str:
    return " ".join(capitalize_first(part) for part in name.split("-"))


def format_stat_value(stat: int) -> str:
    if stat <= 30:
        return "Very Low"
    if stat <= 50:
        return "Low"
    if stat <= 70:
        return "Average"
    if stat <= 90:
        return "Good"
    if stat <= 110:
        return "High"
    if stat <= 130:
        return "Very High"
    return "Exceptional"


def get_tier_rating(total: int) -> str:
    if total >= 680:
        return "Legendary Tier"
    if total >= 600:
        return "Pseudo-Legendary Tier"
    if total >= 550:
        return "High Tier"
    if total >= 500:
        return "Mid-High Tier"
    if total >= 450:
        return "Mid Tier"
    if total >= 400:
        return "Low-Mid Tier"
    if total >= 350:
        return "Low Tier"
    return "Very Low Tier"


def handle_error(exc: BaseException, context: str) -> str:
    """Log ``exc`` and return a one-line message prefixed with ``context``."""

    logger.debug("Error in %s: %r", context, exc)
    message = str(exc) or "Unknown error occurred"
    return f"{context}: {message}"


async def retry_with_backoff(
    func: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Await ``func`` until it succeeds, doubling the delay after each failure."""

    attempt = 0
    while True:
        try:
            return await func()
        except Exception:
            if attempt >= max_retries:
                raise
            delay = base_delay * (2**attempt)
            attempt += 1
            logger.debug(
                "Retry attempt %d/%d after %.2fs", attempt, max_retries + 1, delay
            )
            await sleep(delay)
