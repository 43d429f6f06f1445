"""Async-facing wrapper around PokeAPI with a bounded response cache."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Dict, List, Optional, Union

import requests

from ..models import PokemonListEntry, PokemonPage, PokemonStats, SimplifiedPokemon
from ..utils.helpers import retry_with_backoff
from .cache import DEFAULT_MAX_ENTRIES, DEFAULT_TTL, TTLCache

logger = logging.getLogger(__name__)

Identifier = Union[str, int]

NO_DESCRIPTION = "No description available."

STAT_NAME_MAP = {
    "hp": "hp",
    "attack": "attack",
    "defense": "defense",
    "special-attack": "special_attack",
    "special-defense": "special_defense",
    "speed": "speed",
}

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")


class RemoteFetchError(RuntimeError):
    """Raised when a PokeAPI request fails or returns a non-2xx status."""

    def __init__(self, endpoint: str, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.endpoint = endpoint
        self.status = status
        self.message = message


class PokeAPIClient:
    """Fetches pokemon, species and list records, caching every endpoint read."""

    BASE_URL = "https://pokeapi.co/api/v2/"
    SEARCH_PAGE_SIZE = 1000
    MAX_SEARCH_RESULTS = 5

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        cache: Optional[TTLCache] = None,
        cache_ttl: float = DEFAULT_TTL,
        cache_size: int = DEFAULT_MAX_ENTRIES,
        timeout: int = 10,
        max_retries: int = 0,
        retry_base_delay: float = 1.0,
        locale: str = "en",
        user_agent: str = "Pokemon-MCP-Server/1.0.0",
    ) -> None:
        self.base_url = base_url or self.BASE_URL
        self.session = session or requests.Session()
        self.cache = cache or TTLCache(ttl=cache_ttl, max_entries=cache_size)
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.locale = locale
        self.user_agent = user_agent

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def get_pokemon(self, identifier: Identifier) -> Dict[str, Any]:
        return await self._get_json(f"pokemon/{self._slugify(identifier)}")

    async def get_species(self, identifier: Identifier) -> Dict[str, Any]:
        return await self._get_json(f"pokemon-species/{self._slugify(identifier)}")

    async def get_move(self, identifier: Identifier) -> Dict[str, Any]:
        return await self._get_json(f"move/{self._slugify(identifier)}")

    async def get_pokemon_list(self, limit: int = 20, offset: int = 0) -> PokemonPage:
        payload = await self._get_json(f"pokemon?limit={limit}&offset={offset}")
        return PokemonPage(
            count=payload.get("count", 0),
            next=payload.get("next"),
            previous=payload.get("previous"),
            results=[
                PokemonListEntry(name=item.get("name", ""), url=item.get("url", ""))
                for item in payload.get("results", [])
            ],
        )

    async def get_complete_pokemon(self, identifier: Identifier) -> SimplifiedPokemon:
        """Fetch pokemon and species records concurrently and merge them."""

        try:
            pokemon, species = await asyncio.gather(
                self.get_pokemon(identifier),
                self.get_species(identifier),
            )
        except RemoteFetchError as exc:
            raise RemoteFetchError(
                exc.endpoint,
                f"Failed to get complete Pokemon data for {identifier}: {exc.message}",
                status=exc.status,
            ) from exc
        return self.simplify(pokemon, species, locale=self.locale)

    async def search_pokemon(self, query: str) -> List[SimplifiedPokemon]:
        """Exact lookup first, then a substring scan over a large name page."""

        try:
            return [await self.get_complete_pokemon(query)]
        except RemoteFetchError as exc:
            logger.debug("Exact lookup for %r failed (%s); scanning list", query, exc)

        try:
            page = await self.get_pokemon_list(self.SEARCH_PAGE_SIZE, 0)
        except RemoteFetchError as exc:
            raise RemoteFetchError(
                exc.endpoint,
                f"Failed to search for Pokemon: {exc.message}",
                status=exc.status,
            ) from exc

        needle = query.lower()
        matches = [entry.name for entry in page.results if needle in entry.name.lower()]
        matches = matches[: self.MAX_SEARCH_RESULTS]
        if not matches:
            return []

        results = await asyncio.gather(
            *(self.get_complete_pokemon(name) for name in matches),
            return_exceptions=True,
        )
        found: List[SimplifiedPokemon] = []
        for name, result in zip(matches, results):
            if isinstance(result, RemoteFetchError):
                logger.debug("Skipping search match %s: %s", name, result)
                continue
            if isinstance(result, BaseException):
                raise result
            found.append(result)
        return found

    async def validate_pokemon_exists(self, identifier: Identifier) -> bool:
        try:
            await self.get_pokemon(identifier)
        except RemoteFetchError:
            return False
        return True

    def clear_cache(self) -> None:
        self.cache.clear()

    def cache_size(self) -> int:
        return self.cache.size()

    # ------------------------------------------------------------------
    # Projection
    # ------------------------------------------------------------------
    @staticmethod
    def extract_stats(pokemon: Dict[str, Any]) -> PokemonStats:
        values = {field: 0 for field in STAT_NAME_MAP.values()}
        for entry in pokemon.get("stats", []) or []:
            stat_name = (entry.get("stat") or {}).get("name")
            field = STAT_NAME_MAP.get(stat_name)
            if field and not values[field]:
                values[field] = entry.get("base_stat") or 0
        return PokemonStats(**values)

    @staticmethod
    def simplify(
        pokemon: Dict[str, Any],
        species: Dict[str, Any],
        *,
        locale: str = "en",
    ) -> SimplifiedPokemon:
        types = _ordered_names(pokemon.get("types", []), "type")
        abilities = _ordered_names(pokemon.get("abilities", []), "ability")
        return SimplifiedPokemon(
            id=pokemon.get("id", 0),
            name=pokemon.get("name", ""),
            types=types,
            stats=PokeAPIClient.extract_stats(pokemon),
            abilities=abilities,
            height=pokemon.get("height") or 0,
            weight=pokemon.get("weight") or 0,
            base_experience=pokemon.get("base_experience"),
            is_legendary=bool(species.get("is_legendary")),
            is_mythical=bool(species.get("is_mythical")),
            description=_select_description(species, locale),
            generation=(species.get("generation") or {}).get("name", "unknown"),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _get_json(self, endpoint: str) -> Dict[str, Any]:
        cached = self.cache.get(endpoint)
        if cached is not None:
            return cached

        if self.max_retries:
            payload = await retry_with_backoff(
                lambda: self._fetch(endpoint),
                max_retries=self.max_retries,
                base_delay=self.retry_base_delay,
            )
        else:
            payload = await self._fetch(endpoint)
        self.cache.put(endpoint, payload)
        return payload

    async def _fetch(self, endpoint: str) -> Dict[str, Any]:
        if endpoint.endswith("/"):
            raise RemoteFetchError(endpoint, f"Failed to fetch {endpoint}: empty identifier")
        url = self._build_url(endpoint)
        logger.debug("GET %s", url)
        try:
            response = await asyncio.to_thread(
                self.session.get,
                url,
                timeout=self.timeout,
                headers={
                    "Content-Type": "application/json",
                    "User-Agent": self.user_agent,
                },
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            reason = exc.response.reason if exc.response is not None else str(exc)
            raise RemoteFetchError(
                endpoint,
                f"Failed to fetch {endpoint}: PokeAPI Error: {status} - {reason}",
                status=status,
            ) from exc
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise RemoteFetchError(
                endpoint,
                f"Failed to fetch {endpoint}: PokeAPI Error: No response received "
                "from server. Check internet connection.",
            ) from exc
        except requests.RequestException as exc:
            raise RemoteFetchError(
                endpoint, f"Failed to fetch {endpoint}: PokeAPI Error: {exc}"
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise RemoteFetchError(
                endpoint,
                f"Failed to fetch {endpoint}: invalid JSON payload",
                status=response.status_code,
            ) from exc

    def _build_url(self, endpoint: str) -> str:
        return f"{self.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    @staticmethod
    def _slugify(identifier: Identifier) -> str:
        slug = str(identifier).strip().lower()
        slug = re.sub(r"[\s\.]+", "-", slug)
        return re.sub(r"[^a-z0-9\-]", "", slug)


def _ordered_names(slots: List[Dict[str, Any]], key: str) -> List[str]:
    ordered = sorted(slots or [], key=lambda slot: slot.get("slot", 0))
    names = ((slot.get(key) or {}).get("name") for slot in ordered)
    return list(dict.fromkeys(name for name in names if name))


def _select_description(species: Dict[str, Any], locale: str) -> str:
    for entry in species.get("flavor_text_entries", []) or []:
        if (entry.get("language") or {}).get("name") != locale:
            continue
        text = _CONTROL_CHARS.sub(" ", entry.get("flavor_text") or "")
        text = _WHITESPACE.sub(" ", text).strip()
        return text or NO_DESCRIPTION
    return NO_DESCRIPTION
