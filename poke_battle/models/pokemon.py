"""Dataclasses shared by the catalog client, battle pipeline and renderers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

STAT_FIELDS = (
    "hp",
    "attack",
    "defense",
    "special_attack",
    "special_defense",
    "speed",
)

STAT_LABELS = {
    "hp": "HP",
    "attack": "Attack",
    "defense": "Defense",
    "special_attack": "Special Attack",
    "special_defense": "Special Defense",
    "speed": "Speed",
}


@dataclass(frozen=True, slots=True)
class PokemonStats:
    """Six base stats; ``total`` is always derived, never stored."""

    hp: int = 0
    attack: int = 0
    defense: int = 0
    special_attack: int = 0
    special_defense: int = 0
    speed: int = 0

    @property
    def total(self) -> int:
        return (
            self.hp
            + self.attack
            + self.defense
            + self.special_attack
            + self.special_defense
            + self.speed
        )

    def as_dict(self) -> dict[str, int]:
        return {
            "hp": self.hp,
            "attack": self.attack,
            "defense": self.defense,
            "specialAttack": self.special_attack,
            "specialDefense": self.special_defense,
            "speed": self.speed,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True)
class SimplifiedPokemon:
    """Flattened projection of a pokemon record merged with its species record."""

    id: int
    name: str
    types: List[str] = field(default_factory=list)
    stats: PokemonStats = field(default_factory=PokemonStats)
    abilities: List[str] = field(default_factory=list)
    height: int = 0
    weight: int = 0
    base_experience: Optional[int] = None
    is_legendary: bool = False
    is_mythical: bool = False
    description: str = "No description available."
    generation: str = "unknown"

    @property
    def status(self) -> str:
        if self.is_legendary:
            return "Legendary"
        if self.is_mythical:
            return "Mythical"
        return "Regular"

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "types": list(self.types),
            "stats": self.stats.as_dict(),
            "abilities": list(self.abilities),
            "height": self.height,
            "weight": self.weight,
            "baseExperience": self.base_experience,
            "isLegendary": self.is_legendary,
            "isMythical": self.is_mythical,
            "description": self.description,
            "generation": self.generation,
        }


@dataclass(frozen=True, slots=True)
class PokemonListEntry:
    name: str
    url: str


@dataclass(frozen=True, slots=True)
class PokemonPage:
    """One page of the catalog's name listing."""

    count: int
    results: List[PokemonListEntry] = field(default_factory=list)
    next: Optional[str] = None
    previous: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ModelErrorNotice:
    """Records that the model call failed and the statistical fallback was used."""

    message: str
    occurred: bool = True
    fallback_used: bool = True

    def to_dict(self) -> dict[str, object]:
        return {
            "occurred": self.occurred,
            "message": self.message,
            "fallbackUsed": self.fallback_used,
        }


@dataclass(frozen=True, slots=True)
class BattleOutcome:
    """Structured result of one battle."""

    winner: str
    loser: str
    battle_log: List[str] = field(default_factory=list)
    analysis: str = ""
    summary: str = ""
    model_error: Optional[ModelErrorNotice] = None

    @property
    def used_fallback(self) -> bool:
        return self.model_error is not None and self.model_error.fallback_used
