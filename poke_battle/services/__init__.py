"""Battle orchestration services."""

from .battle_parser import ParseError, ParsedBattle, parse_battle_text
from .battle_pipeline import (
    BattlePipeline,
    BattleReport,
    decide_by_total,
    outcome_from_text,
    statistical_fallback,
)

__all__ = [
    "BattlePipeline",
    "BattleReport",
    "ParseError",
    "ParsedBattle",
    "decide_by_total",
    "outcome_from_text",
    "parse_battle_text",
    "statistical_fallback",
]
