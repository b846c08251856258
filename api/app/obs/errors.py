"""Error reporting helpers."""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

try:  # pragma: no cover - optional dependency
    import sentry_sdk
except ImportError:  # pragma: no cover - sentry not installed
    sentry_sdk = None  # type: ignore

logger = logging.getLogger("obs")


def init_sentry(dsn: Optional[str] = None, env: Optional[str] = None) -> bool:
    """Initialize Sentry when a DSN is configured.

    Returns ``True`` when the SDK was initialised.
    """
    dsn = dsn or os.getenv("ERROR_DSN")
    if not dsn:
        logger.info("ERROR_DSN not set; error sink disabled")
        return False
    if sentry_sdk is None:
        logger.warning("sentry-sdk not installed; skipping init")
        return False
    sentry_sdk.init(dsn=dsn, environment=env)
    return True


def _sentry_active() -> bool:
    return sentry_sdk is not None and sentry_sdk.get_client().is_active()


def capture_exception(
    exc: BaseException, log_fallback: bool = True, **tags: Any
) -> None:
    """Forward ``exc`` to Sentry if configured, else log it with ``tags``.

    Callers that already logged the traceback pass ``log_fallback=False``.
    """
    if _sentry_active():
        with sentry_sdk.new_scope() as scope:
            for key, value in tags.items():
                scope.set_tag(key, value)
            sentry_sdk.capture_exception(exc)
    elif log_fallback:
        logger.error("captured exception %s", tags or "", exc_info=exc)
