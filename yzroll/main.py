"""yzroll — FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from importlib.metadata import version, PackageNotFoundError

from fastapi import FastAPI

from yzroll.api import games, rolls
from yzroll.domain.games import list_games
from yzroll.infra.config import settings

logger = logging.getLogger("yzroll")

try:
    __version__ = version("yzroll")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore[no-untyped-def]
    logging.getLogger("yzroll").setLevel(settings.log_level.upper())
    logger.info(
        "yzroll %s ready, games: %s (default: %s)",
        __version__,
        ", ".join(context.id for context in list_games()),
        settings.default_game,
    )
    yield


app = FastAPI(
    title="yzroll",
    description="Year Zero dice engine — roll, push and modify dice pools",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(games.router)
app.include_router(rolls.router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "engine": "yzroll", "version": __version__}
