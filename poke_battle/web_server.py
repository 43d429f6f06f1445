"""FastAPI web server backing the battle arena page."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .clients import PokeAPIClient
from .config import ConfigError, configure_logging, load_config
from .formatting import (
    battle_view_to_json,
    build_battle_view,
    project_pokemon_record,
    render_terminal_summary,
)
from .llm import GeminiClient
from .services.battle_pipeline import BattlePipeline
from .utils.helpers import ValidationError, require_identifier

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pokemon Battle Arena API",
    description="REST API for Gemini-narrated Pokemon battles",
    version="1.0.0",
)

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"
if STATIC_DIR.exists():
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

TROUBLESHOOTING = {
    "checkApiKey": "Verify GEMINI_API_KEY in .env file",
    "checkConnection": "Ensure internet connection for PokeAPI",
    "fallbackAvailable": "System should provide fallback results",
}


class PokemonRef(BaseModel):
    """A combatant as sent by the browser."""

    name: str


class BattleRequest(BaseModel):
    """Request body for ``POST /api/battle``."""

    pokemon1: Optional[PokemonRef] = None
    pokemon2: Optional[PokemonRef] = None


def install_services(*, pokeapi: PokeAPIClient, pipeline: BattlePipeline) -> None:
    app.state.pokeapi = pokeapi
    app.state.pipeline = pipeline


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _error(status_code: int, **body: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body)


@app.get("/", response_class=HTMLResponse)
async def root():
    """Serve the battle arena page."""
    index_path = STATIC_DIR / "index.html"
    if index_path.exists():
        return index_path.read_text(encoding="utf-8")
    return (
        "<html><body><h1>Pokemon Battle Arena API</h1>"
        "<p>Static files not found. Please ensure static/index.html exists.</p>"
        "</body></html>"
    )


@app.get("/api/pokemon/{name}")
async def get_pokemon(name: str):
    """Return the frontend projection of a single Pokemon."""
    pokeapi: Optional[PokeAPIClient] = getattr(app.state, "pokeapi", None)
    if pokeapi is None:
        return _error(500, error="Service not initialized")
    try:
        identifier = require_identifier(name)
        record = await pokeapi.get_pokemon(identifier)
    except ValidationError as exc:
        return _error(400, error="Invalid Pokemon identifier", details=str(exc))
    except Exception as exc:
        logger.error("Pokemon endpoint error for %s: %s", name, exc)
        return _error(404, error="Pokemon not found", details=str(exc))
    return project_pokemon_record(record)


@app.post("/api/battle")
async def battle(request: BattleRequest):
    """Run a battle and return the outcome with response metadata."""
    pipeline: Optional[BattlePipeline] = getattr(app.state, "pipeline", None)
    if pipeline is None:
        return _error(500, error="Services not initialized")
    if not request.pokemon1 or not request.pokemon2:
        return _error(400, error="Both Pokemon are required")

    try:
        first = require_identifier(request.pokemon1.name)
        second = require_identifier(request.pokemon2.name)
    except ValidationError as exc:
        return _error(400, error="Invalid Pokemon identifier", details=str(exc))

    try:
        report = await pipeline.battle(first, second)
    except Exception as exc:
        logger.error("Battle simulation failed: %s", exc)
        return _error(
            500,
            error="Battle simulation failed",
            details=str(exc),
            timestamp=_now(),
            troubleshooting=TROUBLESHOOTING,
        )

    view = build_battle_view(report)
    logger.info("Battle complete\n%s", render_terminal_summary(view))
    return battle_view_to_json(view, timestamp=_now())


@app.get("/api/test")
async def test_endpoint() -> Dict[str, Any]:
    """Liveness check."""
    pipeline = getattr(app.state, "pipeline", None)
    return {
        "message": "Pokemon Battle Arena API is working!",
        "timestamp": _now(),
        "services": {
            "pokeApi": "initialized" if getattr(app.state, "pokeapi", None) else "missing",
            "gemini": "initialized" if pipeline and pipeline.gemini else "missing",
        },
    }


def run(host: Optional[str] = None, port: Optional[int] = None) -> None:
    """Entry point for running the web server."""
    import uvicorn

    try:
        settings = load_config()
    except ConfigError as exc:
        sys.stderr.write(f"Failed to initialize services: {exc}\n")
        raise SystemExit(1)

    configure_logging(settings.debug)
    pokeapi = PokeAPIClient(base_url=settings.pokeapi_base_url)
    gemini = GeminiClient(api_key=settings.gemini_api_key, model=settings.gemini_model)
    install_services(pokeapi=pokeapi, pipeline=BattlePipeline(pokeapi=pokeapi, gemini=gemini))

    host = host or settings.web_host
    port = port or settings.web_port
    logger.info("Pokemon Battle Arena running at http://%s:%s", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    run()
