"""Static type effectiveness chart and matchup summaries."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

TYPE_CHART: dict[str, dict[str, tuple[str, ...]]] = {
    "normal": {"double": (), "half": ("rock", "steel"), "zero": ("ghost",)},
    "fire": {
        "double": ("grass", "ice", "bug", "steel"),
        "half": ("fire", "water", "rock", "dragon"),
        "zero": (),
    },
    "water": {
        "double": ("fire", "ground", "rock"),
        "half": ("water", "grass", "dragon"),
        "zero": (),
    },
    "electric": {
        "double": ("water", "flying"),
        "half": ("electric", "grass", "dragon"),
        "zero": ("ground",),
    },
    "grass": {
        "double": ("water", "ground", "rock"),
        "half": ("fire", "grass", "poison", "flying", "bug", "dragon", "steel"),
        "zero": (),
    },
    "ice": {
        "double": ("grass", "ground", "flying", "dragon"),
        "half": ("fire", "water", "ice", "steel"),
        "zero": (),
    },
    "fighting": {
        "double": ("normal", "ice", "rock", "dark", "steel"),
        "half": ("poison", "flying", "psychic", "bug", "fairy"),
        "zero": ("ghost",),
    },
    "poison": {
        "double": ("grass", "fairy"),
        "half": ("poison", "ground", "rock", "ghost"),
        "zero": ("steel",),
    },
    "ground": {
        "double": ("fire", "electric", "poison", "rock", "steel"),
        "half": ("grass", "bug"),
        "zero": ("flying",),
    },
    "flying": {
        "double": ("grass", "fighting", "bug"),
        "half": ("electric", "rock", "steel"),
        "zero": (),
    },
    "psychic": {
        "double": ("fighting", "poison"),
        "half": ("psychic", "steel"),
        "zero": ("dark",),
    },
    "bug": {
        "double": ("grass", "psychic", "dark"),
        "half": ("fire", "fighting", "poison", "flying", "ghost", "steel", "fairy"),
        "zero": (),
    },
    "rock": {
        "double": ("fire", "ice", "flying", "bug"),
        "half": ("fighting", "ground", "steel"),
        "zero": (),
    },
    "ghost": {
        "double": ("psychic", "ghost"),
        "half": ("dark",),
        "zero": ("normal",),
    },
    "dragon": {
        "double": ("dragon",),
        "half": ("steel",),
        "zero": ("fairy",),
    },
    "dark": {
        "double": ("psychic", "ghost"),
        "half": ("fighting", "dark", "fairy"),
        "zero": (),
    },
    "steel": {
        "double": ("ice", "rock", "fairy"),
        "half": ("fire", "water", "electric", "steel"),
        "zero": (),
    },
    "fairy": {
        "double": ("fighting", "dragon", "dark"),
        "half": ("fire", "poison", "steel"),
        "zero": (),
    },
}

EFFECTIVENESS_LABELS = {
    0.0: "No effect",
    0.5: "Not very effective",
    1.0: "Normal effectiveness",
    2.0: "Super effective",
}


@dataclass(slots=True)
class TypeMatchup:
    overall: float
    details: List[str] = field(default_factory=list)


def single_multiplier(attack_type: str, defender_type: str) -> float:
    chart = TYPE_CHART.get(attack_type.lower())
    if chart is None:
        return 1.0
    defender = defender_type.lower()
    if defender in chart["zero"]:
        return 0.0
    if defender in chart["double"]:
        return 2.0
    if defender in chart["half"]:
        return 0.5
    return 1.0


def describe_effectiveness(multiplier: float) -> str:
    return EFFECTIVENESS_LABELS.get(multiplier, f"{multiplier:g}x effectiveness")


def calculate_type_matchup(
    attacking_types: Iterable[str], defending_types: Iterable[str]
) -> TypeMatchup:
    """Multiply every attacking/defending type pair and list the non-neutral ones."""

    defenders = list(defending_types)
    matchup = TypeMatchup(overall=1.0)
    for attack in attacking_types:
        for defender in defenders:
            multiplier = single_multiplier(attack, defender)
            matchup.overall *= multiplier
            if multiplier != 1.0:
                matchup.details.append(
                    f"{attack.capitalize()} vs {defender.capitalize()}: "
                    f"{describe_effectiveness(multiplier)}"
                )
    return matchup
