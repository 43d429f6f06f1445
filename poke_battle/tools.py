"""Tool handlers shared by the MCP server: validation, orchestration and rendering."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .clients import PokeAPIClient, RemoteFetchError
from .formatting import (
    build_battle_view,
    format_pokemon_data,
    format_pokemon_list,
    format_search_results,
    format_summary_card,
    render_battle_markdown,
)
from .llm import GeminiClient
from .models import SimplifiedPokemon
from .services.battle_pipeline import BattlePipeline
from .utils.helpers import (
    ValidationError,
    format_pokemon_name,
    handle_error,
    require_identifier,
)

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 20
MAX_LIST_LIMIT = 100
MIN_QUERY_LENGTH = 2

POPULAR_POKEMON = [
    "pikachu", "charizard", "blastoise", "venusaur", "mewtwo",
    "mew", "lugia", "rayquaza", "arceus", "lucario",
]
LEGENDARY_POKEMON = [
    "articuno", "zapdos", "moltres", "mewtwo", "mew",
    "lugia", "ho-oh", "rayquaza", "dialga", "palkia", "arceus",
]
STARTERS_BY_GENERATION: Dict[str, List[str]] = {
    "Generation I": ["bulbasaur", "charmander", "squirtle"],
    "Generation II": ["chikorita", "cyndaquil", "totodile"],
    "Generation III": ["treecko", "torchic", "mudkip"],
    "Generation IV": ["turtwig", "chimchar", "piplup"],
}


@dataclass(frozen=True, slots=True)
class ToolResponse:
    """Rendered tool output; ``is_error`` marks a failed call."""

    text: str
    is_error: bool = False


def clamp_limit(limit: Optional[int]) -> int:
    return max(1, min(limit or DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT))


class PokemonTools:
    """Implements the five Pokemon tools and the three curated resources."""

    def __init__(
        self,
        *,
        pokeapi: PokeAPIClient,
        gemini: Optional[GeminiClient],
        pipeline: Optional[BattlePipeline] = None,
    ) -> None:
        self.pokeapi = pokeapi
        self.gemini = gemini
        self.pipeline = pipeline or BattlePipeline(pokeapi=pokeapi, gemini=gemini)

    async def get_pokemon_data(self, name: str) -> ToolResponse:
        logger.debug("Getting Pokemon data for %r", name)
        try:
            identifier = require_identifier(name)
            pokemon = await self.pokeapi.get_complete_pokemon(identifier)
        except ValidationError as exc:
            return ToolResponse(str(exc), is_error=True)
        except Exception as exc:
            message = handle_error(exc, "get_pokemon_data")
            return ToolResponse(f"Error retrieving Pokemon data: {message}", is_error=True)
        return ToolResponse(format_pokemon_data(pokemon))

    async def battle_simulation(self, pokemon1: str, pokemon2: str) -> ToolResponse:
        logger.debug("Simulating battle %r vs %r", pokemon1, pokemon2)
        try:
            first = require_identifier(pokemon1)
            second = require_identifier(pokemon2)
        except ValidationError:
            return ToolResponse(
                "Invalid Pokemon identifiers. Please provide valid Pokemon names "
                "or Pokedex numbers.",
                is_error=True,
            )
        try:
            report = await self.pipeline.battle(first, second)
        except Exception as exc:
            message = handle_error(exc, "battle_simulation")
            return ToolResponse(f"Error simulating battle: {message}", is_error=True)
        return ToolResponse(render_battle_markdown(build_battle_view(report)))

    async def get_pokemon_list(
        self, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> ToolResponse:
        effective_limit = clamp_limit(limit)
        effective_offset = offset or 0
        logger.debug("Getting Pokemon list limit=%d offset=%d", effective_limit, effective_offset)
        try:
            page = await self.pokeapi.get_pokemon_list(effective_limit, effective_offset)
        except Exception as exc:
            message = handle_error(exc, "get_pokemon_list")
            return ToolResponse(f"Error retrieving Pokemon list: {message}", is_error=True)
        return ToolResponse(format_pokemon_list(page, effective_offset))

    async def search_pokemon(self, query: str) -> ToolResponse:
        logger.debug("Searching Pokemon for %r", query)
        cleaned = (query or "").strip()
        if len(cleaned) < MIN_QUERY_LENGTH:
            return ToolResponse(
                "Search query must be at least 2 characters long.", is_error=True
            )
        try:
            results = await self.pokeapi.search_pokemon(cleaned)
        except Exception as exc:
            message = handle_error(exc, "search_pokemon")
            return ToolResponse(f"Error searching Pokemon: {message}", is_error=True)
        if not results:
            return ToolResponse(
                f'No Pokemon found matching "{query}". Please try a different search term.'
            )
        return ToolResponse(format_search_results(results, query))

    async def analyze_pokemon(self, name: str) -> ToolResponse:
        logger.debug("Analyzing Pokemon %r", name)
        try:
            identifier = require_identifier(name)
            pokemon = await self.pokeapi.get_complete_pokemon(identifier)
            if self.gemini is None:
                raise RuntimeError("Gemini client is not configured")
            analysis = await self.gemini.analyze_pokemon(pokemon)
        except ValidationError as exc:
            return ToolResponse(str(exc), is_error=True)
        except Exception as exc:
            message = handle_error(exc, "analyze_pokemon")
            return ToolResponse(f"Error analyzing Pokemon: {message}", is_error=True)
        return ToolResponse(f"# {format_pokemon_name(pokemon.name)} Analysis\n\n{analysis}")

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------
    async def popular_resource(self) -> str:
        pokemon = await self._fetch_many(POPULAR_POKEMON)
        cards = "\n\n".join(
            format_summary_card(
                p, [f"- Status: {'Legendary' if p.is_legendary else 'Regular'}"]
            )
            for p in pokemon
        )
        return (
            f"# Popular Pokemon\n\n{cards}\n\n"
            "*Use the get_pokemon_data tool for detailed information about any Pokemon*"
        )

    async def legendary_resource(self) -> str:
        pokemon = await self._fetch_many(LEGENDARY_POKEMON)
        cards = "\n\n".join(
            format_summary_card(
                p, [f"- Generation: {p.generation.replace('generation-', '').upper()}"]
            )
            for p in pokemon
        )
        return (
            f"# Legendary Pokemon\n\n{cards}\n\n"
            "*Use the analyze_pokemon tool to get detailed analysis of legendary Pokemon*"
        )

    async def starter_resource(self) -> str:
        every_starter = [name for names in STARTERS_BY_GENERATION.values() for name in names]
        fetched = {p.name.lower(): p for p in await self._fetch_many(every_starter)}
        sections = []
        for generation, names in STARTERS_BY_GENERATION.items():
            cards = "\n\n".join(
                format_summary_card(fetched[name]) for name in names if name in fetched
            )
            sections.append(f"## {generation}\n\n{cards}\n\n")
        return (
            "# Starter Pokemon\n\n"
            + "".join(sections)
            + "*Use the battle_simulation tool to compare starters from different generations*"
        )

    async def _fetch_many(self, names: Sequence[str]) -> List[SimplifiedPokemon]:
        results = await asyncio.gather(
            *(self.pokeapi.get_complete_pokemon(name) for name in names),
            return_exceptions=True,
        )
        fetched: List[SimplifiedPokemon] = []
        for name, result in zip(names, results):
            if isinstance(result, RemoteFetchError):
                logger.debug("Skipping %s in resource listing: %s", name, result)
                continue
            if isinstance(result, BaseException):
                raise result
            fetched.append(result)
        return fetched
