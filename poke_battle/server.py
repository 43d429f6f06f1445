"""FastMCP server exposing the Pokemon battle tools and curated resources."""

from __future__ import annotations

import logging
import sys
from typing import Annotated, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError, ToolError

from .clients import PokeAPIClient
from .config import ConfigError, Settings, configure_logging, load_config
from .llm import GeminiClient
from .tools import PokemonTools, ToolResponse

logger = logging.getLogger(__name__)

app = FastMCP("pokemon-mcp-server", version="1.0.0")
_tools: Optional[PokemonTools] = None


def build_tools(settings: Settings) -> PokemonTools:
    return PokemonTools(
        pokeapi=PokeAPIClient(base_url=settings.pokeapi_base_url),
        gemini=GeminiClient(api_key=settings.gemini_api_key, model=settings.gemini_model),
    )


def install_tools(tools: Optional[PokemonTools]) -> None:
    global _tools
    _tools = tools


def _get_tools(error: type = ToolError) -> PokemonTools:
    if _tools is None:
        raise error("Pokemon tools are not initialised")
    return _tools


def _unwrap(response: ToolResponse) -> str:
    if response.is_error:
        raise ToolError(response.text)
    return response.text


@app.tool()
async def get_pokemon_data(
    name: Annotated[str, 'Pokemon name or Pokedex number (e.g., "pikachu", "25", "charizard")'],
) -> str:
    """Get comprehensive data about a specific Pokemon including stats, types, abilities, and description."""

    return _unwrap(await _get_tools().get_pokemon_data(name))


@app.tool()
async def battle_simulation(
    pokemon1: Annotated[str, "First Pokemon name or Pokedex number"],
    pokemon2: Annotated[str, "Second Pokemon name or Pokedex number"],
) -> str:
    """Simulate a battle between two Pokemon using AI analysis of their stats, types, and abilities."""

    return _unwrap(await _get_tools().battle_simulation(pokemon1, pokemon2))


@app.tool()
async def get_pokemon_list(
    limit: Annotated[Optional[int], "Number of Pokemon to return (max 100, default 20)"] = None,
    offset: Annotated[Optional[int], "Number of Pokemon to skip (default 0)"] = None,
) -> str:
    """Get a list of Pokemon with optional pagination."""

    return _unwrap(await _get_tools().get_pokemon_list(limit, offset))


@app.tool()
async def search_pokemon(
    query: Annotated[str, "Search query (minimum 2 characters)"],
) -> str:
    """Search for Pokemon by name with partial matching."""

    return _unwrap(await _get_tools().search_pokemon(query))


@app.tool()
async def analyze_pokemon(
    name: Annotated[str, "Pokemon name or Pokedex number to analyze"],
) -> str:
    """Get AI-powered analysis of a Pokemon's battle capabilities and characteristics."""

    return _unwrap(await _get_tools().analyze_pokemon(name))


@app.resource(
    "pokemon://popular",
    name="Popular Pokemon List",
    description="A list of popular Pokemon for quick reference",
    mime_type="text/plain",
)
async def popular_pokemon() -> str:
    return await _get_tools(ResourceError).popular_resource()


@app.resource(
    "pokemon://legendary",
    name="Legendary Pokemon",
    description="Information about legendary Pokemon",
    mime_type="text/plain",
)
async def legendary_pokemon() -> str:
    return await _get_tools(ResourceError).legendary_resource()


@app.resource(
    "pokemon://starter",
    name="Starter Pokemon",
    description="Information about starter Pokemon from all generations",
    mime_type="text/plain",
)
async def starter_pokemon() -> str:
    return await _get_tools(ResourceError).starter_resource()


def run() -> None:
    """Entry point for `python -m poke_battle.server` or the console script."""

    try:
        settings = load_config()
    except ConfigError as exc:
        sys.stderr.write(
            f"Error: {exc}. Please set it in your .env file or environment variables.\n"
        )
        raise SystemExit(1)

    configure_logging(settings.debug)
    install_tools(build_tools(settings))
    logger.info("Starting Pokemon MCP server (Gemini model %s)", settings.gemini_model)
    try:
        app.run()
    except Exception:
        logger.exception("Pokemon MCP server crashed")
        raise SystemExit(1)


if __name__ == "__main__":
    run()
