"""Battle pipeline combining PokeAPI lookups, Gemini narration and a stat fallback."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..clients import PokeAPIClient
from ..data.type_chart import calculate_type_matchup
from ..llm import GeminiClient, ModelInvocationError
from ..models import STAT_FIELDS, BattleOutcome, ModelErrorNotice, SimplifiedPokemon
from .battle_parser import ParseError, ParsedBattle, parse_battle_text

logger = logging.getLogger(__name__)

DEFAULT_ANALYSIS = (
    "Statistical analysis determined the outcome based on overall battle capability."
)

ADVANTAGE_LABELS = {
    "hp": "More HP",
    "attack": "Higher Attack",
    "defense": "Higher Defense",
    "special_attack": "Higher Special Attack",
    "special_defense": "Higher Special Defense",
    "speed": "Faster Speed",
}


@dataclass(frozen=True, slots=True)
class BattleReport:
    """A finished battle plus the two combatants it was computed from."""

    outcome: BattleOutcome
    pokemon1: SimplifiedPokemon
    pokemon2: SimplifiedPokemon

    @property
    def using_fallback(self) -> bool:
        return self.outcome.used_fallback


def decide_by_total(
    pokemon1: SimplifiedPokemon, pokemon2: SimplifiedPokemon
) -> Tuple[SimplifiedPokemon, SimplifiedPokemon]:
    """Return ``(winner, loser)``; pokemon2 must be strictly stronger to win a tie."""

    if pokemon2.stats.total > pokemon1.stats.total:
        return pokemon2, pokemon1
    return pokemon1, pokemon2


def outcome_from_text(
    text: str, pokemon1: SimplifiedPokemon, pokemon2: SimplifiedPokemon
) -> BattleOutcome:
    """Reduce model text to a ``BattleOutcome``, filling any missing field."""

    try:
        parsed = parse_battle_text(text)
    except ParseError as exc:
        logger.debug("Falling back on every battle field: %s", exc)
        parsed = ParsedBattle()

    if parsed.winner:
        winner = parsed.winner
        loser = pokemon2.name if winner.lower() == pokemon1.name.lower() else pokemon1.name
    else:
        stronger, weaker = decide_by_total(pokemon1, pokemon2)
        winner, loser = stronger.name, weaker.name

    return BattleOutcome(
        winner=winner,
        loser=loser,
        battle_log=parsed.battle_log or [text],
        analysis=parsed.analysis or DEFAULT_ANALYSIS,
        summary=parsed.summary or f"{winner} emerged victorious in this Pokemon battle.",
    )


def stat_advantages(winner: SimplifiedPokemon, loser: SimplifiedPokemon) -> List[str]:
    return [
        ADVANTAGE_LABELS[stat]
        for stat in STAT_FIELDS
        if getattr(winner.stats, stat) > getattr(loser.stats, stat)
    ]


def statistical_fallback(
    pokemon1: SimplifiedPokemon,
    pokemon2: SimplifiedPokemon,
    error: Optional[Exception] = None,
) -> BattleOutcome:
    """Deterministic stat-based outcome used when Gemini is unavailable."""

    winner, loser = decide_by_total(pokemon1, pokemon2)
    attack_type = winner.types[0] if winner.types else "normal"
    battle_log = [
        f"{pokemon1.name} enters the battlefield with {pokemon1.stats.hp} HP!",
        f"{pokemon2.name} prepares for battle with {pokemon2.stats.speed} speed!",
        f"{winner.name} used {attack_type}-type attack!",
        f"{loser.name} counters with a defensive move!",
        f"{loser.name} is defeated! {winner.name} emerges victorious!",
    ]

    advantages = ", ".join(stat_advantages(winner, loser)) or "None"
    if winner.stats.total == loser.stats.total:
        opening = (
            f"{winner.name} and {loser.name} have equal total stats "
            f"({winner.stats.total}); the tie goes to {winner.name}."
        )
    else:
        opening = (
            f"{winner.name} won due to superior total stats "
            f"({winner.stats.total} vs {loser.stats.total})."
        )
    matchup = calculate_type_matchup(winner.types, loser.types)
    matchup_text = f"{matchup.overall:g}x"
    if matchup.details:
        matchup_text += f" ({'; '.join(matchup.details)})"
    analysis = (
        f"{opening} Key advantages: {advantages}. "
        f"Type advantage: {'/'.join(winner.types)} vs {'/'.join(loser.types)} {matchup_text}."
    )

    message = str(error) if error is not None else "Gemini API unavailable"
    return BattleOutcome(
        winner=winner.name,
        loser=loser.name,
        battle_log=battle_log,
        analysis=analysis,
        summary=(
            f"{winner.name} dominated this Pokemon battle through statistical "
            "superiority and strategic type advantages."
        ),
        model_error=ModelErrorNotice(message=message),
    )


class BattlePipeline:
    """Fetches both combatants, asks Gemini for a battle and recovers from failures."""

    def __init__(self, *, pokeapi: PokeAPIClient, gemini: Optional[GeminiClient]) -> None:
        self.pokeapi = pokeapi
        self.gemini = gemini

    async def fetch_pair(
        self, identifier1: str, identifier2: str
    ) -> Tuple[SimplifiedPokemon, SimplifiedPokemon]:
        pokemon1, pokemon2 = await asyncio.gather(
            self.pokeapi.get_complete_pokemon(identifier1),
            self.pokeapi.get_complete_pokemon(identifier2),
        )
        return pokemon1, pokemon2

    async def simulate(
        self, pokemon1: SimplifiedPokemon, pokemon2: SimplifiedPokemon
    ) -> BattleOutcome:
        if self.gemini is None:
            logger.warning("Gemini client unavailable; using statistical fallback")
            return statistical_fallback(pokemon1, pokemon2)
        try:
            text = await self.gemini.simulate_battle(pokemon1, pokemon2)
        except ModelInvocationError as exc:
            logger.warning("Using fallback battle simulation: %s", exc)
            return statistical_fallback(pokemon1, pokemon2, exc)
        return outcome_from_text(text, pokemon1, pokemon2)

    async def battle(self, identifier1: str, identifier2: str) -> BattleReport:
        """Run a full battle; catalog failures propagate as ``RemoteFetchError``."""

        pokemon1, pokemon2 = await self.fetch_pair(identifier1, identifier2)
        logger.debug(
            "Battle %s (%d) vs %s (%d)",
            pokemon1.name,
            pokemon1.stats.total,
            pokemon2.name,
            pokemon2.stats.total,
        )
        outcome = await self.simulate(pokemon1, pokemon2)
        return BattleReport(outcome=outcome, pokemon1=pokemon1, pokemon2=pokemon2)
