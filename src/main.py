"""FastAPI application entrypoint."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from src.api.game import router as game_router
from src.api.health import router as health_router
from src.config import settings
from src.core.event_bus import EventBus
from src.core.game_data import load_game_data
from src.core.logging import get_logger, setup_logging
from src.core.turn_engine import TurnEngine
from src.services.turn_service import TurnService

setup_logging(settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup and shutdown events."""
    # 정적 테이블 로드 (프로세스당 1회, 이후 불변)
    logger.info("Loading game tables...")
    game_data = load_game_data(settings.GAME_DATA_PATH)
    app.state.game_data = game_data

    # 턴 엔진 초기화
    balance = settings.build_balance()
    engine = TurnEngine(game_data, balance)
    logger.info(
        "Turn engine initialized (encounter=%.2f, loot=%.2f)",
        balance.encounter_chance,
        balance.loot_drop_chance,
    )

    # TurnService 초기화
    event_bus = EventBus()
    app.state.event_bus = event_bus
    app.state.turn_service = TurnService(engine, event_bus)
    logger.info("TurnService initialized.")

    yield

    logger.info("Shutting down...")
    event_bus.clear()
    app.state.game_data = None


app = FastAPI(title="Survival Turn Engine", lifespan=lifespan)

app.include_router(health_router)
app.include_router(game_router)
