"""Text and JSON renderers shared by the MCP tools and the web API.

Battles go through a single ``BattleView`` so both surfaces show the same
winner, log, analysis, summary and fallback warning.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .clients.pokeapi import PokeAPIClient
from .models import ModelErrorNotice, PokemonPage, SimplifiedPokemon
from .services.battle_pipeline import BattleReport
from .utils.helpers import (
    capitalize_first,
    format_pokemon_name,
    format_stat_value,
    get_tier_rating,
)

FALLBACK_WARNING = "This battle used fallback simulation due to API issues"


@dataclass(frozen=True, slots=True)
class BattleView:
    """Presentation-ready battle result."""

    pokemon1: str
    pokemon2: str
    pokemon1_total: int
    pokemon2_total: int
    winner: str
    loser: str
    battle_log: List[str] = field(default_factory=list)
    analysis: str = ""
    summary: str = ""
    model_error: Optional[ModelErrorNotice] = None

    @property
    def using_fallback(self) -> bool:
        return self.model_error is not None

    @property
    def warning(self) -> Optional[str]:
        if self.model_error is None:
            return None
        return f"{FALLBACK_WARNING}: {self.model_error.message}"


def build_battle_view(report: BattleReport) -> BattleView:
    outcome = report.outcome
    return BattleView(
        pokemon1=report.pokemon1.name,
        pokemon2=report.pokemon2.name,
        pokemon1_total=report.pokemon1.stats.total,
        pokemon2_total=report.pokemon2.stats.total,
        winner=outcome.winner,
        loser=outcome.loser,
        battle_log=list(outcome.battle_log),
        analysis=outcome.analysis,
        summary=outcome.summary,
        model_error=outcome.model_error,
    )


def render_battle_markdown(view: BattleView) -> str:
    """Markdown shape returned by the ``battle_simulation`` tool."""

    lines = [
        f"# Battle Simulation: {format_pokemon_name(view.pokemon1)} vs "
        f"{format_pokemon_name(view.pokemon2)}",
        "",
        "## Battle Result",
        f"🏆 **Winner:** {format_pokemon_name(view.winner)}",
        "",
        "## Battle Narrative",
        "\n\n".join(view.battle_log),
        "",
        "## Strategic Analysis",
        view.analysis,
        "",
        "## Summary",
        view.summary,
        "",
    ]
    if view.warning:
        lines.extend([f"> ⚠️ **Note:** {view.warning}", ""])
    lines.extend(["---", "*Battle simulation powered by Gemini AI*"])
    return "\n".join(lines)


def battle_view_to_json(view: BattleView, *, timestamp: str) -> Dict[str, Any]:
    """JSON body returned by ``POST /api/battle``."""

    payload: Dict[str, Any] = {
        "winner": view.winner,
        "loser": view.loser,
        "battleLog": list(view.battle_log),
        "analysis": view.analysis,
        "summary": view.summary,
    }
    if view.model_error is not None:
        payload["geminiError"] = view.model_error.to_dict()
    payload["metadata"] = {
        "timestamp": timestamp,
        "usingFallback": view.using_fallback,
        "pokemon1": view.pokemon1,
        "pokemon2": view.pokemon2,
        "serverStatus": "success",
    }
    return payload


def render_terminal_summary(view: BattleView) -> str:
    rule = "=" * 60
    lines = [
        rule,
        "POKEMON BATTLE ARENA",
        rule,
        f"BATTLE: {view.pokemon1.upper()} vs {view.pokemon2.upper()}",
        f"STATS: {view.pokemon1} ({view.pokemon1_total}) vs {view.pokemon2} ({view.pokemon2_total})",
        "",
        "BATTLE LOG:",
        "-" * 40,
    ]
    lines.extend(f"Turn {index}: {turn}" for index, turn in enumerate(view.battle_log, 1))
    lines.extend(
        [
            "",
            f"WINNER: {view.winner.upper()}",
            f"LOSER: {view.loser}",
            "",
            "ANALYSIS:",
            view.analysis,
            "",
            "SUMMARY:",
            view.summary,
        ]
    )
    if view.warning:
        lines.extend(["", f"NOTE: {view.warning}"])
    lines.append(rule)
    return "\n".join(lines)


def format_pokemon_data(pokemon: SimplifiedPokemon) -> str:
    stats = pokemon.stats
    types = ", ".join(capitalize_first(t) for t in pokemon.types)
    abilities = ", ".join(format_pokemon_name(a) for a in pokemon.abilities)
    generation = capitalize_first(pokemon.generation.replace("generation-", ""))

    def stat_line(label: str, value: int) -> str:
        return f"- **{label}:** {value} ({format_stat_value(value)})"

    return "\n".join(
        [
            f"# {format_pokemon_name(pokemon.name)} (#{pokemon.id})",
            "",
            "## Basic Information",
            f"- **Type(s):** {types}",
            f"- **Height:** {pokemon.height / 10:g}m",
            f"- **Weight:** {pokemon.weight / 10:g}kg",
            f"- **Base Experience:** {pokemon.base_experience}",
            f"- **Generation:** {generation}",
            f"- **Status:** {pokemon.status} Pokemon",
            "",
            "## Description",
            pokemon.description,
            "",
            "## Base Stats",
            stat_line("HP", stats.hp),
            stat_line("Attack", stats.attack),
            stat_line("Defense", stats.defense),
            stat_line("Special Attack", stats.special_attack),
            stat_line("Special Defense", stats.special_defense),
            stat_line("Speed", stats.speed),
            f"- **Total:** {stats.total} ({get_tier_rating(stats.total)})",
            "",
            "## Abilities",
            abilities,
            "",
            "---",
            "*Data retrieved from PokeAPI*",
        ]
    )


def format_pokemon_list(page: PokemonPage, offset: int) -> str:
    if not page.results:
        return "\n".join(
            [
                f"# Pokemon List (offset {offset} of {page.count})",
                "",
                "No Pokemon on this page. Try a smaller offset.",
            ]
        )
    items = [
        f"{offset + index}. {format_pokemon_name(entry.name)}"
        for index, entry in enumerate(page.results, 1)
    ]
    start = offset + 1
    end = offset + len(page.results)
    return "\n".join(
        [
            f"# Pokemon List ({start}-{end} of {page.count})",
            "",
            *items,
            "",
            "---",
            '*Use "get_pokemon_data" with a specific name or number to get detailed information*',
            '*Use "get_pokemon_list" with different offset values to see more Pokemon*',
        ]
    )


def format_summary_card(pokemon: SimplifiedPokemon, extra: Iterable[str] = ()) -> str:
    lines = [
        f"**{format_pokemon_name(pokemon.name)}** (#{pokemon.id})",
        f"- Types: {', '.join(capitalize_first(t) for t in pokemon.types)}",
        f"- Total Stats: {pokemon.stats.total}",
    ]
    lines.extend(extra)
    return "\n".join(lines)


def format_search_results(results: Sequence[SimplifiedPokemon], query: str) -> str:
    cards = "\n\n".join(
        format_summary_card(pokemon, [f"- Status: {pokemon.status}"]) for pokemon in results
    )
    return (
        f'# Search Results for "{query}"\n\n'
        f"Found {len(results)} Pokemon:\n\n"
        f"{cards}\n\n"
        "---\n"
        '*Use "get_pokemon_data" with a specific name to get detailed information*'
    )


def project_pokemon_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Frontend shape of a raw PokeAPI pokemon record."""

    stats = PokeAPIClient.extract_stats(record).as_dict()
    stats.pop("total")
    return {
        "id": record.get("id"),
        "name": record.get("name"),
        "sprites": record.get("sprites") or {},
        "types": [(slot.get("type") or {}).get("name") for slot in record.get("types", [])],
        "stats": stats,
        "abilities": [
            (slot.get("ability") or {}).get("name") for slot in record.get("abilities", [])
        ],
        "height": record.get("height"),
        "weight": record.get("weight"),
    }
