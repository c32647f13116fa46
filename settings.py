from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from errors import ConfigurationError


DEFAULT_PORT = 3000
# Free-tier hosts (e.g. Render) sleep after 15 minutes without traffic.
DEFAULT_KEEPALIVE_INTERVAL_SECONDS = 14 * 60
DEFAULT_MAX_BODY_BYTES = 50 * 1024 * 1024


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    # Document store
    docstore_uri: str

    # Listener
    host: str
    port: int

    # Deployment / URLs
    public_base_url: str
    local_base_url: str

    # Keep-alive
    keepalive_enabled: bool
    keepalive_interval_seconds: int

    # Requests
    max_body_bytes: int
    cors_allow_origins: tuple[str, ...]

    # Debug
    debug_log_requests: bool
    log_level: str

    @property
    def keepalive_base_url(self) -> str:
        return self.public_base_url or self.local_base_url


def get_settings() -> Settings:
    docstore_uri = os.getenv("DOCSTORE_URI", "").strip()
    if not docstore_uri:
        raise ConfigurationError("DOCSTORE_URI environment variable is not defined.")

    host = os.getenv("HOST", "0.0.0.0")
    port = _env_int("PORT", DEFAULT_PORT)

    # Render publishes the service URL as RENDER_EXTERNAL_URL.
    public_base_url = (os.getenv("PUBLIC_BASE_URL") or os.getenv("RENDER_EXTERNAL_URL") or "").rstrip("/")
    local_base_url = f"http://localhost:{port}"

    keepalive_enabled = _env_bool("KEEPALIVE_ENABLED", True)
    keepalive_interval_seconds = _env_int("KEEPALIVE_INTERVAL_SECONDS", DEFAULT_KEEPALIVE_INTERVAL_SECONDS)
    if keepalive_interval_seconds <= 0:
        raise ConfigurationError("KEEPALIVE_INTERVAL_SECONDS must be positive")

    max_body_bytes = _env_int("MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES)

    origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
    cors_allow_origins = tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",)

    debug_log_requests = _env_bool("DEBUG_LOG_REQUESTS", False)
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    if log_level not in logging.getLevelNamesMapping():
        raise ConfigurationError(f"LOG_LEVEL {log_level!r} is not a logging level")

    return Settings(
        docstore_uri=docstore_uri,
        host=host,
        port=port,
        public_base_url=public_base_url,
        local_base_url=local_base_url,
        keepalive_enabled=keepalive_enabled,
        keepalive_interval_seconds=keepalive_interval_seconds,
        max_body_bytes=max_body_bytes,
        cors_allow_origins=cors_allow_origins,
        debug_log_requests=debug_log_requests,
        log_level=log_level,
    )
