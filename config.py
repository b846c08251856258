# config.py

"""Application configuration utilities.

Values are primarily loaded from ``config.json`` and may be overridden by
environment variables. The :func:`get_settings` helper merges the two sources
and caches the result.
"""

from __future__ import annotations

import json
import os
import shlex
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Comma separated origin patterns, parsed by ``api.app.config.cors``.
    allowed_origins: str = ""
    health_path: str = "/api/health"
    health_suffix: str = "/health"
    app_version: str = "1.0.0"
    service_state: str = "running"
    backend_command: str = "node node_modules/manifest/scripts/watch/watch.js"
    log_level: str = "INFO"
    port: int = 8000
    env: str = "dev"

    @property
    def backend_argv(self) -> list[str]:
        """Return :attr:`backend_command` split into an argument vector."""
        return shlex.split(self.backend_command)


# Cached singleton to avoid repeated file reads
@lru_cache
def get_settings() -> Settings:
    """Return merged settings with environment variable precedence.

    The configuration is read from ``config.json`` located alongside this file
    and fed into :class:`Settings`. Environment variables override any values
    from the JSON file. A missing JSON file falls back to the field defaults.
    """

    config_path = Path(__file__).with_name("config.json")
    data = json.loads(config_path.read_text()) if config_path.exists() else {}
    env_override = {
        k.lower(): v
        for k, v in os.environ.items()
        if k.lower() in Settings.model_fields
    }
    merged = {**data, **env_override}
    return Settings(**merged)
