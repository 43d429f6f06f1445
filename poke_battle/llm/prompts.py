"""Prompt templates sent to Gemini.

The section headings are shared with :mod:`poke_battle.services.battle_parser`;
change both together.
"""

from __future__ import annotations

from typing import Sequence

from ..models import SimplifiedPokemon

WINNER_HEADING = "**WINNER:**"
BATTLE_LOG_HEADING = "**BATTLE LOG:**"
ANALYSIS_HEADING = "**STRATEGIC ANALYSIS:**"
SUMMARY_HEADING = "**SUMMARY:**"


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _stat_block(pokemon: SimplifiedPokemon, *, include_generation: bool = False) -> str:
    stats = pokemon.stats
    lines = [
        f"- Type(s): {', '.join(pokemon.types)}",
        f"- HP: {stats.hp}",
        f"- Attack: {stats.attack}",
        f"- Defense: {stats.defense}",
        f"- Special Attack: {stats.special_attack}",
        f"- Special Defense: {stats.special_defense}",
        f"- Speed: {stats.speed}",
        f"- Total Base Stats: {stats.total}",
        f"- Abilities: {', '.join(pokemon.abilities)}",
        f"- Height: {pokemon.height / 10:g}m, Weight: {pokemon.weight / 10:g}kg",
        f"- Legendary: {_yes_no(pokemon.is_legendary)}",
        f"- Mythical: {_yes_no(pokemon.is_mythical)}",
    ]
    if include_generation:
        lines.append(f"- Generation: {pokemon.generation}")
    lines.append(f"- Description: {pokemon.description}")
    return "\n".join(lines)


def build_battle_prompt(pokemon1: SimplifiedPokemon, pokemon2: SimplifiedPokemon) -> str:
    name1, name2 = pokemon1.name, pokemon2.name
    return f"""You are a Pokemon battle simulator and expert analyst. Simulate a battle between {name1} and {name2}.

**{name1} Stats:**
{_stat_block(pokemon1)}

**{name2} Stats:**
{_stat_block(pokemon2)}

Please provide:
1. **WINNER**: State clearly who wins the battle
2. **BATTLE LOG**: A detailed battle with each turn on a new line in format "Pokemon used Move!" (5 turns)
3. **STRATEGIC ANALYSIS**: Explain the key factors that determined the outcome
4. **SUMMARY**: A brief summary of why the winner prevailed

Format the BATTLE LOG as:
{BATTLE_LOG_HEADING}
Turn 1: Pokemon1 used Move1!
Turn 2: Pokemon2 used Move2!
Turn 3: Pokemon1 used Move3!
Turn 4: Pokemon2 used Move4!
Turn 5: Pokemon1 used Move5!

Consider:
- Type advantages/disadvantages
- Stat comparisons (especially speed for turn order)
- Abilities and their potential effects
- Pokemon size and legendary status
- Realistic battle mechanics
- Engaging storytelling

Format your response as:
{WINNER_HEADING} [Pokemon Name]

{BATTLE_LOG_HEADING}
[Detailed battle narrative]

{ANALYSIS_HEADING}
[Analysis of key factors]

{SUMMARY_HEADING}
[Brief conclusion]"""


def build_analysis_prompt(pokemon: SimplifiedPokemon) -> str:
    return f"""Analyze the Pokemon {pokemon.name} and provide insights about its battle capabilities and characteristics.

**{pokemon.name} Details:**
{_stat_block(pokemon, include_generation=True)}

Please provide a comprehensive analysis covering:
1. Strengths and weaknesses
2. Best battle strategies
3. Type matchup advantages
4. Notable characteristics
5. Overall battle tier assessment

Keep the analysis informative yet engaging, around 200-300 words."""


def build_comparison_prompt(pokemon_list: Sequence[SimplifiedPokemon]) -> str:
    details = []
    for pokemon in pokemon_list:
        stats = pokemon.stats
        details.append(
            f"**{pokemon.name}:**\n"
            f"- Type(s): {', '.join(pokemon.types)}\n"
            f"- Total Stats: {stats.total} (HP:{stats.hp}, ATK:{stats.attack}, "
            f"DEF:{stats.defense}, SpA:{stats.special_attack}, "
            f"SpD:{stats.special_defense}, SPD:{stats.speed})\n"
            f"- Abilities: {', '.join(pokemon.abilities)}\n"
            f"- Status: {pokemon.status}"
        )
    joined = "\n\n".join(details)
    return f"""Compare and rank these Pokemon based on their battle capabilities and overall strength:

{joined}

Please provide:
1. **RANKING**: Order them from strongest to weakest with brief reasoning
2. **ANALYSIS**: Compare their key strengths and weaknesses
3. **BATTLE PREDICTIONS**: How they might fare against each other
4. **RECOMMENDATIONS**: Best use cases for each Pokemon

Keep the comparison balanced and informative."""
