"""Command-line interface for running Pokemon battles without a server."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime, timezone

from poke_battle.clients import PokeAPIClient, RemoteFetchError
from poke_battle.config import ConfigError, configure_logging, load_config
from poke_battle.formatting import battle_view_to_json, build_battle_view, render_battle_markdown
from poke_battle.llm import GeminiClient, ModelInvocationError
from poke_battle.services.battle_pipeline import BattlePipeline
from poke_battle.utils import ValidationError, require_identifier


async def _run_battle(pipeline: BattlePipeline, first: str, second: str, as_json: bool) -> str:
    report = await pipeline.battle(require_identifier(first), require_identifier(second))
    view = build_battle_view(report)
    if as_json:
        timestamp = datetime.now(timezone.utc).isoformat()
        return json.dumps(battle_view_to_json(view, timestamp=timestamp), indent=2)
    return render_battle_markdown(view)


async def _run_compare(pokeapi: PokeAPIClient, gemini: GeminiClient, names: list[str]) -> str:
    identifiers = [require_identifier(name) for name in names]
    pokemon = await asyncio.gather(*(pokeapi.get_complete_pokemon(i) for i in identifiers))
    return await gemini.compare_pokemon(pokemon)


def _build_parser() -> argparse.ArgumentParser:
    debug_help = "Print debug progress information to stderr"
    parser = argparse.ArgumentParser(description="Gemini-narrated Pokemon battles")
    parser.add_argument("--debug", action="store_true", help=debug_help)

    # SUPPRESS keeps a subcommand from resetting a --debug given before it.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--debug", action="store_true", default=argparse.SUPPRESS, help=debug_help)
    commands = parser.add_subparsers(dest="command", required=True)

    battle = commands.add_parser(
        "battle", parents=[common], help="Simulate a battle between two Pokemon"
    )
    battle.add_argument("pokemon1", help="First Pokemon name or Pokedex number")
    battle.add_argument("pokemon2", help="Second Pokemon name or Pokedex number")
    battle.add_argument(
        "--json",
        action="store_true",
        help="Emit the battle result as JSON",
    )

    compare = commands.add_parser(
        "compare", parents=[common], help="Rank two or more Pokemon with Gemini"
    )
    compare.add_argument("names", nargs="+", help="Pokemon names or Pokedex numbers")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        settings = load_config()
    except ConfigError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    configure_logging(args.debug or settings.debug)
    pokeapi = PokeAPIClient(base_url=settings.pokeapi_base_url)
    gemini = GeminiClient(api_key=settings.gemini_api_key, model=settings.gemini_model)

    try:
        if args.command == "battle":
            pipeline = BattlePipeline(pokeapi=pokeapi, gemini=gemini)
            output = asyncio.run(_run_battle(pipeline, args.pokemon1, args.pokemon2, args.json))
        else:
            if len(args.names) < 2:
                sys.stderr.write("At least 2 Pokemon are required for comparison\n")
                return 2
            output = asyncio.run(_run_compare(pokeapi, gemini, args.names))
    except (ValidationError, RemoteFetchError, ModelInvocationError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
