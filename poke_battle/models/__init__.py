"""Shared dataclasses for Pokemon records and battle outcomes."""

from .pokemon import (
    STAT_FIELDS,
    STAT_LABELS,
    BattleOutcome,
    ModelErrorNotice,
    PokemonListEntry,
    PokemonPage,
    PokemonStats,
    SimplifiedPokemon,
)

__all__ = [
    "STAT_FIELDS",
    "STAT_LABELS",
    "BattleOutcome",
    "ModelErrorNotice",
    "PokemonListEntry",
    "PokemonPage",
    "PokemonStats",
    "SimplifiedPokemon",
]
