"""External data clients used by the Pokemon battle server."""

from .cache import TTLCache
from .pokeapi import PokeAPIClient, RemoteFetchError

__all__ = [
    "PokeAPIClient",
    "RemoteFetchError",
    "TTLCache",
]
