"""Shared helpers for identifiers, formatting and retries."""

from .helpers import (
    IdentifierCheck,
    ValidationError,
    format_pokemon_name,
    require_identifier,
    retry_with_backoff,
    sanitize_input,
    validate_identifier,
)

__all__ = [
    "IdentifierCheck",
    "ValidationError",
    "format_pokemon_name",
    "require_identifier",
    "retry_with_backoff",
    "sanitize_input",
    "validate_identifier",
]
