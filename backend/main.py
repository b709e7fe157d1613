"""Linkdrop — Main application entry point."""

import asyncio
import logging
import logging.config
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from alembic import command
from alembic.config import Config
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from blob_store import LocalBlobStore
from cleanup import cleanup_loop
from errors import ConfigError, Unauthorized
from events import EventPublisher, PanelsChanged, log_panels_changed
from store import Store

from api.codes.controllers.codes_controller import router as codes_router
from api.download.controllers.download_controller import router as download_router
from api.files.controllers.files_controller import router as files_router
from api.links.controllers.links_controller import router as links_router
from api.pages.controllers.pages_controller import router as pages_router
from api.panels.controllers.panels_controller import router as panels_router
from api.upload.controllers.upload_controller import router as upload_router

LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "standard": {
            "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
        }
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "standard",
        }
    },
    "root": {
        "handlers": ["default"],
        "level": config.LOG_LEVEL,
    },
}

logging.config.dictConfig(LOGGING_CONFIG)
logger = logging.getLogger(__name__)


def run_migrations(database_url: str) -> None:
    """Run Alembic migrations on startup."""
    try:
        alembic_ini = Path(__file__).parent / "alembic.ini"
        alembic_cfg = Config(str(alembic_ini))
        alembic_cfg.set_main_option(
            "script_location", str(Path(__file__).parent / "db_migrations")
        )
        alembic_cfg.set_main_option("sqlalchemy.url", database_url)
        command.upgrade(alembic_cfg, "head")
    except Exception as e:
        # Store.open() falls back to create_all
        logger.warning(f"Migration failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not config.ADMIN_SECRET:
        logger.error("ADMIN_SECRET is not set; admin routes are disabled")

    state = app.state
    if state.store is None:
        run_migrations(config.DATABASE_URL)
        state.store = Store(config.DATABASE_URL)
    state.store.open()

    reaper = None
    if state.cleanup_interval:
        reaper = asyncio.create_task(
            cleanup_loop(state.store, state.blobs, state.events, state.cleanup_interval)
        )

    try:
        yield
    finally:
        if reaper is not None:
            reaper.cancel()
            try:
                await reaper
            except asyncio.CancelledError:
                pass
        await state.events.drain()
        state.store.close()


def create_app(
    store: Store | None = None,
    blobs: LocalBlobStore | None = None,
    events: EventPublisher | None = None,
    cleanup_interval: float | None = config.CLEANUP_INTERVAL_SECONDS,
) -> FastAPI:
    """Build the app. Handles not supplied here are created from config."""
    app = FastAPI(title="Linkdrop", version="0.1.0", lifespan=lifespan)

    if events is None:
        events = EventPublisher()
        events.subscribe(PanelsChanged, log_panels_changed)
    app.state.store = store
    app.state.blobs = blobs or LocalBlobStore(config.UPLOAD_DIR)
    app.state.events = events
    app.state.cleanup_interval = cleanup_interval

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Unauthorized)
    async def unauthorized_handler(request: Request, exc: Unauthorized):
        return JSONResponse({"detail": "Unauthorized"}, status_code=401)

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError):
        logger.error(f"Refusing {request.url.path}: {exc}")
        return JSONResponse({"detail": "Server configuration error"}, status_code=500)

    @app.get("/health")
    async def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(files_router)
    app.include_router(codes_router)
    app.include_router(links_router)
    app.include_router(panels_router)
    app.include_router(upload_router)
    app.include_router(download_router)
    app.include_router(pages_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
