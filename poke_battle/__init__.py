"""Pokemon battle MCP server and web API utilities."""

from .clients.pokeapi import PokeAPIClient, RemoteFetchError
from .services.battle_pipeline import BattlePipeline, statistical_fallback
from .services.battle_parser import parse_battle_text

__all__ = [
    "BattlePipeline",
    "PokeAPIClient",
    "RemoteFetchError",
    "parse_battle_text",
    "statistical_fallback",
]
