"""
Central configuration for the Imaginify backend.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from fastapi import Request


@dataclass(frozen=True)
class Settings:
    app_env: str
    app_name: str
    debug: bool
    log_level: str
    mongodb_url: str | None
    mongodb_db_name: str
    mongodb_buffer_commands: bool
    mongodb_server_selection_timeout_ms: int
    jwt_secret: str
    jwt_algorithm: str
    jwt_expire_minutes: int
    google_client_id: str | None
    sign_in_route: str
    cors_allow_origins: list[str]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def _env_optional(name: str) -> str | None:
    raw = (os.getenv(name) or "").strip()
    return raw or None


def get_settings() -> Settings:
    raw_origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
    if raw_origins.strip() == "*":
        cors_allow_origins = ["*"]
    else:
        cors_allow_origins = [x.strip() for x in raw_origins.split(",") if x.strip()]

    return Settings(
        app_env=os.getenv("APP_ENV", "dev").strip().lower(),
        app_name=os.getenv("APP_NAME", "Imaginify"),
        debug=_env_bool("DEBUG", False),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        # No default; a missing URL is reported on first connect.
        mongodb_url=_env_optional("MONGODB_URL"),
        mongodb_db_name=os.getenv("MONGODB_DB_NAME", "Imaginify").strip() or "Imaginify",
        mongodb_buffer_commands=_env_bool("MONGODB_BUFFER_COMMANDS", False),
        mongodb_server_selection_timeout_ms=_env_int("MONGODB_SERVER_SELECTION_TIMEOUT_MS", 5000),
        jwt_secret=os.getenv("JWT_SECRET", "CHANGE_ME_SECRET"),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expire_minutes=_env_int("JWT_EXPIRE_MINUTES", 60),
        google_client_id=_env_optional("GOOGLE_CLIENT_ID"),
        sign_in_route=os.getenv("SIGN_IN_ROUTE", "/sign-in").strip() or "/sign-in",
        cors_allow_origins=cors_allow_origins,
    )


def get_app_settings(request: Request) -> Settings:
    """FastAPI dependency returning the settings the app was created with."""
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()
