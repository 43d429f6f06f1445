"""Tests for outcome derivation, the statistical fallback and the pipeline."""

from __future__ import annotations

import asyncio

import pytest

from poke_battle.clients import RemoteFetchError
from poke_battle.services.battle_pipeline import (
    DEFAULT_ANALYSIS,
    BattlePipeline,
    decide_by_total,
    outcome_from_text,
    statistical_fallback,
)

MODEL_TEXT = """**WINNER:** pikachu
**BATTLE LOG:**
Pikachu used Thunderbolt!
**STRATEGIC ANALYSIS:**
Speed.
**SUMMARY:**
Pikachu wins.
"""


def test_decide_by_total_tie_favours_first(make_pokemon) -> None:
    first = make_pokemon("first", [50] * 6)
    second = make_pokemon("second", [60, 40, 50, 50, 50, 50])

    winner, loser = decide_by_total(first, second)
    assert (winner.name, loser.name) == ("first", "second")


def test_decide_by_total_strictly_greater_wins(make_pokemon) -> None:
    first = make_pokemon("first", [50] * 6)
    second = make_pokemon("second", [51, 50, 50, 50, 50, 50])
    assert decide_by_total(first, second)[0].name == "second"


def test_outcome_from_text_uses_declared_winner(make_pokemon) -> None:
    pikachu = make_pokemon("Pikachu", [35, 55, 40, 50, 50, 90])
    onix = make_pokemon("onix", [35, 45, 160, 30, 45, 70])

    outcome = outcome_from_text(MODEL_TEXT, pikachu, onix)

    assert outcome.winner == "pikachu"
    assert outcome.loser == "onix"
    assert outcome.battle_log == ["Pikachu used Thunderbolt!"]
    assert outcome.model_error is None


def test_outcome_from_unstructured_text_falls_back_per_field(make_pokemon) -> None:
    pikachu = make_pokemon("pikachu", [35, 55, 40, 50, 50, 90])
    onix = make_pokemon("onix", [35, 45, 160, 30, 45, 70])
    text = "Onix simply shrugs off every attack."

    outcome = outcome_from_text(text, pikachu, onix)

    assert outcome.winner == "onix"
    assert outcome.loser == "pikachu"
    assert outcome.battle_log == [text]
    assert outcome.analysis == DEFAULT_ANALYSIS
    assert outcome.summary == "onix emerged victorious in this Pokemon battle."


def test_outcome_missing_only_summary(make_pokemon) -> None:
    pikachu = make_pokemon("pikachu", [50] * 6)
    onix = make_pokemon("onix", [50] * 6)
    outcome = outcome_from_text("**WINNER:** Onix\n**BATTLE LOG:**\nTurn 1", pikachu, onix)

    assert outcome.winner == "Onix"
    assert outcome.loser == "pikachu"
    assert outcome.summary == "Onix emerged victorious in this Pokemon battle."


def test_statistical_fallback_tie_names_first(make_pokemon) -> None:
    first = make_pokemon("first", [50] * 6, ["fire"])
    second = make_pokemon("second", [50] * 6, ["grass"])

    outcome = statistical_fallback(first, second, RuntimeError("quota"))

    assert outcome.winner == "first"
    assert len(outcome.battle_log) == 5
    assert "tie goes to first" in outcome.analysis
    assert "Super effective" in outcome.analysis
    assert outcome.model_error.message == "quota"
    assert outcome.used_fallback


def test_statistical_fallback_lists_stat_advantages(make_pokemon) -> None:
    pikachu = make_pokemon("pikachu", [35, 55, 40, 50, 50, 90], ["electric"])
    onix = make_pokemon("onix", [35, 45, 160, 30, 45, 70], ["rock", "ground"])

    outcome = statistical_fallback(pikachu, onix)

    assert outcome.winner == "onix"
    assert "Higher Defense" in outcome.analysis
    assert "Faster Speed" not in outcome.analysis
    assert "(385 vs 320)" in outcome.analysis


def test_pipeline_uses_fallback_when_model_fails(pokeapi, failing_gemini) -> None:
    pipeline = BattlePipeline(pokeapi=pokeapi, gemini=failing_gemini)

    report = asyncio.run(pipeline.battle("pikachu", "onix"))

    assert report.using_fallback
    assert report.outcome.winner == "onix"
    assert len(report.outcome.battle_log) == 5
    assert "quota exceeded" in report.outcome.model_error.message


def test_pipeline_parses_model_text(pokeapi, scripted_gemini) -> None:
    gemini = scripted_gemini(MODEL_TEXT)
    pipeline = BattlePipeline(pokeapi=pokeapi, gemini=gemini)

    report = asyncio.run(pipeline.battle("pikachu", "onix"))

    assert not report.using_fallback
    assert report.outcome.winner == "pikachu"
    assert gemini.battles == [("pikachu", "onix")]


def test_pipeline_propagates_fetch_errors(pokeapi, failing_gemini) -> None:
    pipeline = BattlePipeline(pokeapi=pokeapi, gemini=failing_gemini)
    with pytest.raises(RemoteFetchError):
        asyncio.run(pipeline.battle("pikachu", "missingno"))
    assert failing_gemini.battles == []
