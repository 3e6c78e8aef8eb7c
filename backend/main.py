"""
FastAPI Backend

Main API server for the Imaginify application.
The MongoDB connection is owned by the app and opened lazily on first use.
"""

# Load .env FIRST, before any other imports that read env vars.
from pathlib import Path
from dotenv import load_dotenv

_project_root = Path(__file__).resolve().parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(dotenv_path=_env_file)
else:
    load_dotenv()  # fallback: current directory

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from backend.app.api.navigation import router as navigation_router
from backend.app.core.auth.google_login import router as google_auth_router
from backend.app.core.config import Settings, get_settings
from backend.app.core.db.mongo import ConfigurationError, MongoConnectionCache
from backend.app.core.middleware import setup_middleware
from backend.app.observability.logging import log_event, setup_logging


def create_app(
    settings: Optional[Settings] = None,
    connection_cache: Optional[MongoConnectionCache] = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.mongo = connection_cache or MongoConnectionCache.from_settings(settings)
        log_event("app_started", app_env=settings.app_env, db_name=app.state.mongo.db_name)
        try:
            yield
        finally:
            await app.state.mongo.close()

    app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)
    app.state.settings = settings
    setup_middleware(app, settings)

    app.include_router(google_auth_router)
    app.include_router(navigation_router)

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError):
        log_event(
            "configuration_error",
            level=logging.ERROR,
            request_id=getattr(request.state, "request_id", ""),
            path=request.url.path,
            error=str(exc),
        )
        return JSONResponse(status_code=503, content={"error": str(exc)})

    @app.exception_handler(PyMongoError)
    async def database_error_handler(request: Request, exc: PyMongoError):
        log_event(
            "database_error",
            level=logging.ERROR,
            request_id=getattr(request.state, "request_id", ""),
            path=request.url.path,
            error_class=type(exc).__name__,
            error=str(exc),
        )
        return JSONResponse(status_code=503, content={"error": "Database unavailable"})

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", "")
        classification = type(exc).__name__
        log_event(
            "unhandled_exception",
            level=logging.ERROR,
            request_id=request_id,
            path=request.url.path,
            error_class=classification,
            error=str(exc),
        )
        return JSONResponse(status_code=500, content={"error": f"Internal error: {classification}"})

    @app.get("/health")
    async def health(request: Request):
        cache: MongoConnectionCache = request.app.state.mongo
        return {
            "status": "ok",
            "app": settings.app_name,
            "app_env": settings.app_env,
            "db_name": cache.db_name,
            "db_state": cache.state,
        }

    @app.get("/health/db")
    async def health_db(request: Request):
        cache: MongoConnectionCache = request.app.state.mongo
        conn = await cache.get_connection()
        await conn.ping()
        return {"status": "ok", "db_name": cache.db_name, "db_state": cache.state}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
