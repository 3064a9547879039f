from __future__ import annotations

import os
from dataclasses import dataclass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw.strip())


@dataclass(frozen=True)
class Settings:
    # Store
    store_url: str
    store_timeout_ms: int

    # Singleton profile key ("my profile")
    profile_user_id: int

    # Listener
    host: str
    port: int
    cors_allow_origins: list[str]

    # Logging
    log_level: str
    debug_log_requests: bool

    @property
    def store_timeout_s(self) -> float:
        return self.store_timeout_ms / 1000.0


def get_settings() -> Settings:
    # Relative file paths resolve against the working directory.
    store_url = os.getenv("PROFILE_STORE_URL", "file:./data").strip()
    store_timeout_ms = _env_int("PROFILE_STORE_TIMEOUT_MS", 5000)

    profile_user_id = _env_int("PROFILE_USER_ID", 1)

    host = os.getenv("HOST", "0.0.0.0")
    port = _env_int("PORT", 3000)
    cors_allow_origins = [
        o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()
    ]

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", True)

    return Settings(
        store_url=store_url,
        store_timeout_ms=store_timeout_ms,
        profile_user_id=profile_user_id,
        host=host,
        port=port,
        cors_allow_origins=cors_allow_origins,
        log_level=log_level,
        debug_log_requests=debug_log_requests,
    )
