"""Line-oriented state machine that splits Gemini battle text into sections."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from ..llm.prompts import (
    ANALYSIS_HEADING,
    BATTLE_LOG_HEADING,
    SUMMARY_HEADING,
    WINNER_HEADING,
)


class ParseError(ValueError):
    """Raised when model text contains none of the expected section headings."""


class Section(Enum):
    NONE = "none"
    WINNER = "winner"
    LOG = "battle_log"
    ANALYSIS = "analysis"
    SUMMARY = "summary"


HEADINGS: Tuple[Tuple[str, Section], ...] = (
    (WINNER_HEADING, Section.WINNER),
    (BATTLE_LOG_HEADING, Section.LOG),
    (ANALYSIS_HEADING, Section.ANALYSIS),
    (SUMMARY_HEADING, Section.SUMMARY),
)


@dataclass(slots=True)
class ParsedBattle:
    """Raw section contents; empty fields mean the model left them out."""

    winner: str = ""
    battle_log: List[str] = field(default_factory=list)
    analysis: str = ""
    summary: str = ""


def match_heading(line: str) -> Tuple[Optional[Section], str]:
    """Return the section a stripped line opens and any text after the heading."""

    for heading, section in HEADINGS:
        if line.startswith(heading):
            return section, line[len(heading):].strip()
    return None, line


def parse_battle_text(text: str) -> ParsedBattle:
    """Accumulate lines under whichever heading was seen last.

    Raises ``ParseError`` if no heading appears at all.
    """

    parsed = ParsedBattle()
    state = Section.NONE
    seen_heading = False

    for raw_line in text.splitlines():
        line = raw_line.strip()
        section, remainder = match_heading(line)
        if section is not None:
            state = section
            seen_heading = True
            line = remainder
        if line:
            _accumulate(parsed, state, line)

    if not seen_heading:
        raise ParseError("No battle section headings found in model output")
    return parsed


def _accumulate(parsed: ParsedBattle, state: Section, line: str) -> None:
    if state is Section.WINNER:
        # Only the first line under the heading names the winner.
        if not parsed.winner:
            parsed.winner = line
    elif state is Section.LOG:
        parsed.battle_log.append(line)
    elif state is Section.ANALYSIS:
        parsed.analysis = f"{parsed.analysis} {line}" if parsed.analysis else line
    elif state is Section.SUMMARY:
        parsed.summary = f"{parsed.summary} {line}" if parsed.summary else line
