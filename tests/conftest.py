"""Shared fakes for the PokeAPI session and the Gemini client."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest
import requests

from poke_battle.clients import PokeAPIClient, TTLCache
from poke_battle.llm import ModelInvocationError
from poke_battle.models import PokemonStats, SimplifiedPokemon

BASE_URL = "https://pokeapi.test/api/v2"

STAT_KEYS = ("hp", "attack", "defense", "special-attack", "special-defense", "speed")


def pokemon_record(
    name: str,
    pokemon_id: int,
    types: List[str],
    stats: List[int],
    abilities: List[str],
    *,
    height: int = 4,
    weight: int = 60,
) -> Dict[str, Any]:
    return {
        "id": pokemon_id,
        "name": name,
        "base_experience": 112,
        "height": height,
        "weight": weight,
        # Slots listed out of order to exercise sorting.
        "types": [
            {"slot": index, "type": {"name": t, "url": ""}}
            for index, t in reversed(list(enumerate(types, 1)))
        ],
        "abilities": [
            {"slot": index, "is_hidden": index > 1, "ability": {"name": a, "url": ""}}
            for index, a in reversed(list(enumerate(abilities, 1)))
        ],
        "stats": [
            {"base_stat": value, "effort": 0, "stat": {"name": key, "url": ""}}
            for key, value in zip(STAT_KEYS, stats)
        ],
        "sprites": {"front_default": f"https://sprites.test/{pokemon_id}.png"},
    }


def species_record(
    name: str,
    *,
    flavor: str = "A test Pokemon.",
    legendary: bool = False,
    mythical: bool = False,
    generation: str = "generation-i",
) -> Dict[str, Any]:
    return {
        "name": name,
        "is_legendary": legendary,
        "is_mythical": mythical,
        "generation": {"name": generation, "url": ""},
        "flavor_text_entries": [
            {"flavor_text": "Texte en francais.", "language": {"name": "fr"}},
            {"flavor_text": flavor, "language": {"name": "en"}},
        ],
    }


def default_catalog() -> Dict[str, Any]:
    catalog: Dict[str, Any] = {
        "pokemon/pikachu": pokemon_record(
            "pikachu", 25, ["electric"], [35, 55, 40, 50, 50, 90], ["static", "lightning-rod"]
        ),
        "pokemon-species/pikachu": species_record(
            "pikachu",
            flavor="When several of\nthese POKéMON\fgather, their\x0celectricity could build.",
        ),
        "pokemon/onix": pokemon_record(
            "onix", 95, ["rock", "ground"], [35, 45, 160, 30, 45, 70], ["rock-head", "sturdy"],
            height=88, weight=2100,
        ),
        "pokemon-species/onix": species_record("onix", flavor="It burrows underground."),
        "pokemon/pichu": pokemon_record(
            "pichu", 172, ["electric"], [20, 40, 15, 35, 35, 60], ["static"]
        ),
        "pokemon-species/pichu": species_record("pichu", generation="generation-ii"),
        "pokemon/mewtwo": pokemon_record(
            "mewtwo", 150, ["psychic"], [106, 110, 90, 154, 90, 130], ["pressure"]
        ),
        "pokemon-species/mewtwo": species_record("mewtwo", legendary=True),
    }
    names = ["bulbasaur", "pichu", "pikachu", "raichu", "onix", "mewtwo"]
    catalog["pokemon?limit=1000&offset=0"] = {
        "count": 1302,
        "next": None,
        "previous": None,
        "results": [{"name": n, "url": f"{BASE_URL}/pokemon/{n}/"} for n in names],
    }
    return catalog


class FakeResponse:
    def __init__(self, status_code: int, payload: Any = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.reason = "OK" if status_code < 400 else "Not Found"

    def json(self) -> Any:
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} {self.reason}", response=self)


class FakeSession:
    """Serves catalog payloads keyed by endpoint and records every requested URL."""

    def __init__(self, catalog: Dict[str, Any]) -> None:
        self.catalog = catalog
        self.calls: List[str] = []
        self.fail_with: Optional[Exception] = None

    def get(self, url: str, timeout: Optional[float] = None, headers: Any = None) -> FakeResponse:
        self.calls.append(url)
        if self.fail_with is not None:
            raise self.fail_with
        endpoint = url[len(BASE_URL) + 1 :]
        if endpoint.startswith("pokemon?"):
            if endpoint not in self.catalog:
                results = self.catalog["pokemon?limit=1000&offset=0"]["results"]
                return FakeResponse(200, {"count": 1302, "next": None, "previous": None, "results": results})
        if endpoint not in self.catalog:
            return FakeResponse(404)
        return FakeResponse(200, self.catalog[endpoint])

    def count(self, fragment: str) -> int:
        return sum(1 for url in self.calls if url.endswith(fragment))


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGemini:
    """Returns canned battle text or raises ``ModelInvocationError``."""

    def __init__(self, battle_text: Optional[str] = None, *, fail: bool = False) -> None:
        self.battle_text = battle_text
        self.fail = fail
        self.battles: List[tuple] = []

    async def simulate_battle(self, pokemon1, pokemon2) -> str:
        self.battles.append((pokemon1.name, pokemon2.name))
        if self.fail:
            raise ModelInvocationError("Gemini API failed: quota exceeded (ResourceExhausted)")
        return self.battle_text or ""

    async def analyze_pokemon(self, pokemon) -> str:
        if self.fail:
            raise ModelInvocationError("Gemini API failed: timeout (DeadlineExceeded)")
        return f"{pokemon.name} is a solid pick."

    async def compare_pokemon(self, pokemon_list) -> str:
        return "Ranking: " + ", ".join(p.name for p in pokemon_list)


@pytest.fixture
def catalog() -> Dict[str, Any]:
    return default_catalog()


@pytest.fixture
def session(catalog) -> FakeSession:
    return FakeSession(catalog)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pokeapi(session, clock) -> PokeAPIClient:
    return PokeAPIClient(
        base_url=BASE_URL,
        session=session,
        cache=TTLCache(ttl=30 * 60, clock=clock),
    )


@pytest.fixture
def make_pokemon() -> Callable[..., SimplifiedPokemon]:
    def _make(name: str, stats: List[int], types: Optional[List[str]] = None) -> SimplifiedPokemon:
        return SimplifiedPokemon(
            id=1,
            name=name,
            types=types or ["normal"],
            stats=PokemonStats(*stats),
            abilities=["run-away"],
        )

    return _make


@pytest.fixture
def failing_gemini() -> FakeGemini:
    return FakeGemini(fail=True)


@pytest.fixture
def scripted_gemini() -> Callable[[str], FakeGemini]:
    return FakeGemini
