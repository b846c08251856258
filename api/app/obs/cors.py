"""Observers receiving origin access filter events."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Protocol

from starlette.requests import Request

from ..routes_metrics import (
    cors_decisions_total,
    cors_failures_total,
    cors_preflight_total,
    liveness_checks_total,
)
from .errors import capture_exception

logger = logging.getLogger("api.cors")


class OriginObserver(Protocol):
    """Sink for the diagnostic events emitted by ``OriginAccessMiddleware``."""

    def decision(self, origin: str | None, allowed: bool, request: Request) -> None:
        ...

    def preflight(self, request: Request) -> None:
        ...

    def liveness(self, payload: Mapping[str, Any], request: Request) -> None:
        ...

    def failure(self, exc: Exception, request: Request) -> None:
        ...


class LoggingObserver:
    """Write filter events to the ``api.cors`` logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self.log = log or logger

    def decision(self, origin: str | None, allowed: bool, request: Request) -> None:
        extra = {"origin": origin, "route": request.url.path}
        if allowed:
            self.log.debug("origin allowed method=%s", request.method, extra=extra)
        else:
            self.log.info("origin blocked method=%s", request.method, extra=extra)

    def preflight(self, request: Request) -> None:
        self.log.debug(
            "preflight answered",
            extra={"origin": request.headers.get("origin"), "route": request.url.path},
        )

    def liveness(self, payload: Mapping[str, Any], request: Request) -> None:
        self.log.debug(
            "health check app_id=%s",
            payload.get("appId"),
            extra={"route": request.url.path, "status": 200},
        )

    def failure(self, exc: Exception, request: Request) -> None:
        self.log.warning(
            "origin check failed; continuing without CORS headers",
            exc_info=exc,
            extra={"route": request.url.path},
        )
        capture_exception(
            exc, log_fallback=False, component="cors", route=request.url.path
        )


class MetricsObserver:
    """Count filter events with Prometheus counters."""

    def decision(self, origin: str | None, allowed: bool, request: Request) -> None:
        cors_decisions_total.labels(outcome="allowed" if allowed else "blocked").inc()

    def preflight(self, request: Request) -> None:
        cors_preflight_total.inc()

    def liveness(self, payload: Mapping[str, Any], request: Request) -> None:
        liveness_checks_total.inc()

    def failure(self, exc: Exception, request: Request) -> None:
        cors_failures_total.inc()


class CompositeObserver:
    """Fan each event out to several observers in order."""

    def __init__(self, observers: Iterable[OriginObserver]) -> None:
        self.observers = list(observers)

    def decision(self, origin: str | None, allowed: bool, request: Request) -> None:
        for obs in self.observers:
            obs.decision(origin, allowed, request)

    def preflight(self, request: Request) -> None:
        for obs in self.observers:
            obs.preflight(request)

    def liveness(self, payload: Mapping[str, Any], request: Request) -> None:
        for obs in self.observers:
            obs.liveness(payload, request)

    def failure(self, exc: Exception, request: Request) -> None:
        for obs in self.observers:
            obs.failure(exc, request)


def default_observer() -> OriginObserver:
    return CompositeObserver([LoggingObserver(), MetricsObserver()])
