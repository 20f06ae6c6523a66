"""cardczar API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map CardCzarError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - One random source, one store, one notifier per process, built in lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Services hung on app.state (read by api/dependencies.py) so tests can
      build the app with their own store/catalog/rng
    - The card catalog always lives in the database; only game states can be
      kept in memory (store_backend="memory")
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardczar.api.error_handlers import register_error_handlers
from cardczar.api.routes import cards, game_state_stream, game_states, health
from cardczar.config import Settings, get_settings
from cardczar.core.randomness import create_random_source
from cardczar.infrastructure.database import init_db
from cardczar.infrastructure.memory_store import InMemoryGameStateStore
from cardczar.infrastructure.notifier import StateBroadcaster
from cardczar.infrastructure.observability import setup_logging
from cardczar.services.card_catalog import SqlCardCatalog
from cardczar.services.game_service import GameService
from cardczar.services.game_state_repository import SqlGameStateStore

logger = logging.getLogger(__name__)


def build_services(app: FastAPI, settings: Settings, db) -> None:
    """Wire store, catalog, notifier and RNG into app.state."""
    rng = create_random_source(settings.rng_seed)
    if settings.store_backend == "memory":
        store = InMemoryGameStateStore()
    else:
        store = SqlGameStateStore(db)
    catalog = SqlCardCatalog(
        db,
        max_text_length=settings.max_card_text_length,
        max_blanks=settings.max_blanks,
    )
    notifier = StateBroadcaster()
    app.state.store_backend = settings.store_backend
    app.state.card_catalog = catalog
    app.state.notifier = notifier
    app.state.game_service = GameService(
        store, catalog, notifier, rng,
        min_black_cards=settings.min_black_cards,
        min_white_cards=settings.min_white_cards,
        scheduler_id=settings.scheduler_user_id,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    if settings.database_url.startswith("sqlite"):
        await db.create_tables()
    build_services(app, settings, db)
    logger.info(f"cardczar API started (store={settings.store_backend})")
    yield
    await db.dispose()
    logger.info("cardczar API shutting down")


app = FastAPI(
    title="cardczar API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(cards.router)
app.include_router(game_states.router)
app.include_router(game_state_stream.router)

register_error_handlers(app)
