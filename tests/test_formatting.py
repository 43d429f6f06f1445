"""Tests for battle views and the text/JSON renderers."""

from __future__ import annotations

from poke_battle.formatting import (
    battle_view_to_json,
    build_battle_view,
    format_pokemon_data,
    format_pokemon_list,
    project_pokemon_record,
    render_battle_markdown,
    render_terminal_summary,
)
from poke_battle.models import BattleOutcome, PokemonListEntry, PokemonPage
from poke_battle.services.battle_pipeline import BattleReport, statistical_fallback


def _report(make_pokemon, outcome=None) -> BattleReport:
    pikachu = make_pokemon("pikachu", [35, 55, 40, 50, 50, 90], ["electric"])
    onix = make_pokemon("onix", [35, 45, 160, 30, 45, 70], ["rock", "ground"])
    if outcome is None:
        outcome = BattleOutcome(
            winner="pikachu",
            loser="onix",
            battle_log=["Turn 1: Pikachu used Surf!", "Turn 2: Onix fainted!"],
            analysis="Surf was unexpected.",
            summary="Pikachu surprised everyone.",
        )
    return BattleReport(outcome=outcome, pokemon1=pikachu, pokemon2=onix)


def test_markdown_rendering_is_idempotent(make_pokemon) -> None:
    view = build_battle_view(_report(make_pokemon))
    assert render_battle_markdown(view) == render_battle_markdown(view)


def test_markdown_contains_every_field(make_pokemon) -> None:
    text = render_battle_markdown(build_battle_view(_report(make_pokemon)))

    assert text.startswith("# Battle Simulation: Pikachu vs Onix")
    assert "🏆 **Winner:** Pikachu" in text
    assert "Turn 1: Pikachu used Surf!\n\nTurn 2: Onix fainted!" in text
    assert "Surf was unexpected." in text
    assert "Pikachu surprised everyone." in text
    assert "fallback" not in text


def test_both_renderers_surface_fallback(make_pokemon) -> None:
    base = _report(make_pokemon)
    outcome = statistical_fallback(base.pokemon1, base.pokemon2, RuntimeError("quota"))
    view = build_battle_view(_report(make_pokemon, outcome))

    text = render_battle_markdown(view)
    payload = battle_view_to_json(view, timestamp="2024-01-01T00:00:00+00:00")

    assert "fallback simulation due to API issues: quota" in text
    assert payload["geminiError"] == {"occurred": True, "message": "quota", "fallbackUsed": True}
    assert payload["metadata"]["usingFallback"] is True
    assert len(payload["battleLog"]) == 5
    assert "NOTE:" in render_terminal_summary(view)


def test_json_without_fallback(make_pokemon) -> None:
    payload = battle_view_to_json(build_battle_view(_report(make_pokemon)), timestamp="t")

    assert "geminiError" not in payload
    assert payload["metadata"] == {
        "timestamp": "t",
        "usingFallback": False,
        "pokemon1": "pikachu",
        "pokemon2": "onix",
        "serverStatus": "success",
    }


def test_pokemon_data_rendering(make_pokemon) -> None:
    pikachu = make_pokemon("pikachu", [35, 55, 40, 50, 50, 90], ["electric"])
    text = format_pokemon_data(pikachu)

    assert text.startswith("# Pikachu (#1)")
    assert "- **Speed:** 90 (Good)" in text
    assert "- **Total:** 320 (Very Low Tier)" in text
    assert "- **Status:** Regular Pokemon" in text


def test_list_rendering_numbers_from_offset() -> None:
    page = PokemonPage(
        count=1302,
        results=[PokemonListEntry("mr-mime", ""), PokemonListEntry("scyther", "")],
    )
    text = format_pokemon_list(page, 121)

    assert text.startswith("# Pokemon List (122-123 of 1302)")
    assert "122. Mr Mime" in text
    assert "123. Scyther" in text


def test_project_pokemon_record_defaults_missing_stats() -> None:
    record = {
        "id": 25,
        "name": "pikachu",
        "types": [{"slot": 1, "type": {"name": "electric"}}],
        "abilities": [{"slot": 1, "ability": {"name": "static"}}],
        "stats": [{"base_stat": 90, "stat": {"name": "speed"}}],
        "height": 4,
        "weight": 60,
    }
    projected = project_pokemon_record(record)

    assert projected["stats"]["speed"] == 90
    assert projected["stats"]["hp"] == 0
    assert "total" not in projected["stats"]
    assert projected["types"] == ["electric"]


def test_list_rendering_past_the_end() -> None:
    page = PokemonPage(count=1302, results=[])
    text = format_pokemon_list(page, 2000)

    assert text.startswith("# Pokemon List (offset 2000 of 1302)")
    assert "No Pokemon on this page" in text
    assert "2001-2000" not in text
