"""TopGames — FastAPI Application Entry Point.

Top-chart game catalog: CRUD over games, search, and a populate endpoint that
reloads the Android and iOS top 100 charts.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from topgames.config import Settings, settings as default_settings
from topgames.database import build_engine, init_db, test_connection, _mask_url
from topgames.scheduler.jobs import start_scheduler, stop_scheduler
from topgames.api.game_routes import router as games_router
from topgames.core.logging import get_logger

logger = get_logger("main")

FRONTEND_DIR = Path(__file__).resolve().parent.parent / "frontend"

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("🚀 TopGames starting up...")
    engine = app.state.engine
    if test_connection(engine):
        try:
            init_db(engine)
        except Exception as e:
            logger.error(f"❌ Table creation failed: {e}")
    else:
        logger.error("❌ Database NOT connected, endpoints will fail")
    app.state.scheduler = start_scheduler(engine, app.state.settings)
    yield
    stop_scheduler(app.state.scheduler)
    engine.dispose()
    logger.info("TopGames shut down")


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"] if p != "body") or "body"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed input as a 400 instead of FastAPI's default 422."""
    details = _format_validation_errors(exc)
    logger.warning(
        f"Invalid input: {details}",
        extra={"endpoint": request.url.path, "status_code": 400},
    )
    return JSONResponse(
        status_code=400, content={"error": "Invalid input", "details": details}
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build a configured application. Nothing connects until startup."""
    settings = settings or default_settings

    app = FastAPI(
        title="TopGames",
        description="Game catalog backed by the Android and iOS top 100 charts.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = build_engine(settings.effective_database_url)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # Routers
    app.include_router(games_router)

    # Static files (frontend)
    app.mount(
        "/static",
        StaticFiles(directory=str(FRONTEND_DIR), check_dir=False),
        name="static",
    )

    @app.get("/", include_in_schema=False)
    async def root():
        """Serve the catalog page."""
        return FileResponse(str(FRONTEND_DIR / "index.html"))

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": "topgames", "version": VERSION}

    @app.get("/debug/db", tags=["System"])
    async def debug_db(request: Request):
        """Debug endpoint: check database connectivity."""
        db_url = request.app.state.settings.effective_database_url
        error = None
        connected = False
        try:
            connected = test_connection(request.app.state.engine)
        except Exception as e:
            error = str(e)

        backend = "sqlite" if db_url.startswith("sqlite") else "postgresql"
        return {
            "connected": connected,
            "backend": backend,
            "url": _mask_url(db_url),
            "error": error,
        }

    return app


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        create_app(),
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
