"""Startup configuration validation utilities."""

from __future__ import annotations

import logging

from config import Settings, get_settings

from .cors import parse_allowed_origins

logger = logging.getLogger("api.config")


def suspicious_patterns(patterns: tuple[str, ...]) -> list[str]:
    """Return wildcard patterns not shaped ``*.<suffix>``.

    Only the leading ``*.`` form is understood by the matcher; anything else
    containing ``*`` is reduced by a plain string replace and rarely does what
    the operator intended.
    """
    bad = []
    for pattern in patterns:
        if "*" not in pattern:
            continue
        if not pattern.startswith("*.") or "*" in pattern[2:] or len(pattern) == 2:
            bad.append(pattern)
    return bad


def validate_on_boot(settings: Settings | None = None) -> tuple[str, ...]:
    """Check the origin allow-list and log the effective configuration.

    Returns the parsed allow-list. Problems are logged, never raised; an empty
    allow-list is reported at ERROR in ``prod``.
    """

    settings = settings or get_settings()
    origins = parse_allowed_origins(settings.allowed_origins)

    if not origins:
        log_fn = logger.error if settings.env == "prod" else logger.warning
        log_fn("ALLOWED_ORIGINS is empty; no origin will receive CORS headers")

    for pattern in suspicious_patterns(origins):
        logger.warning("unsupported wildcard pattern in ALLOWED_ORIGINS: %s", pattern)

    logger.info("ALLOWED_ORIGINS=%s", ",".join(origins))
    logger.info(
        "health_path=%s health_suffix=%s version=%s",
        settings.health_path,
        settings.health_suffix,
        settings.app_version,
    )
    return origins
