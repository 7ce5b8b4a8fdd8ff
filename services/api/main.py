import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from loguru import logger

from core.exceptions import SketchVaultError
from core.logging_config import setup_logging
from core.settings import Settings, get_settings
from core.storage.client import DrawingStorage
from core.storage.factory import create_drawing_storage
from services.api.exception_handlers import sketchvault_exception_handler, unhandled_exception_handler
from services.api.routes import router as drawings_router


def create_app(storage: DrawingStorage | None = None, settings: Settings | None = None) -> FastAPI:
    """Build the API. ``storage`` is injected by tests; otherwise built from settings at startup."""
    json_logging = os.getenv("JSON_LOGGING", "false").lower() in {"true", "1", "yes"}
    log_level = os.getenv("LOG_LEVEL", "INFO")
    log_file = os.getenv("LOG_FILE")
    setup_logging(
        level=log_level,
        json_format=json_logging,
        log_file=Path(log_file) if log_file else None,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "drawing_storage", None) is None:
            app.state.drawing_storage = create_drawing_storage(settings or get_settings())
        logger.info(
            "API initialised with storage backend={backend}",
            backend=type(app.state.drawing_storage.backend).__name__,
        )
        yield

    app = FastAPI(
        title="SketchVault API",
        version="0.1.0",
        description="Drawing payload and thumbnail storage",
        lifespan=lifespan,
    )
    app.state.drawing_storage = storage

    ui_origin = os.getenv("UI_ORIGIN", "http://localhost:5173")
    allowed_origins = {ui_origin, "http://localhost:5173", "http://127.0.0.1:5173"}
    logger.info(f"CORS allowed origins: {sorted(allowed_origins)}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=sorted(allowed_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/healthz", tags=["meta"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    app.add_exception_handler(SketchVaultError, sketchvault_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(drawings_router)

    local_settings = settings or _settings_or_none()
    if local_settings is not None and local_settings.storage.backend == "local":
        app.mount(
            local_settings.storage.local_base_url,
            StaticFiles(directory=str(local_settings.storage.local_root), check_dir=False),
            name="drawing-files",
        )

    return app


def _settings_or_none() -> Settings | None:
    try:
        return get_settings()
    except (FileNotFoundError, ValueError) as exc:
        logger.warning(f"Settings unavailable, static drawing files not mounted: {exc}")
        return None


app = create_app()


__all__ = ["app", "create_app"]
