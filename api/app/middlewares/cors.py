from __future__ import annotations

import logging
from typing import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_204_NO_CONTENT

from ..config.cors import parse_allowed_origins
from ..cors import Allowed, OriginPolicy
from ..obs.cors import OriginObserver, default_observer
from ..utils.timestamps import utc_timestamp

logger = logging.getLogger("api.cors")


class OriginAccessMiddleware(BaseHTTPMiddleware):
    """Allow-list CORS filter that also answers preflight and health checks.

    Every request is checked against the allow-list first. Allowed origins get
    the four ``Access-Control-*`` headers. ``OPTIONS`` requests then end with
    an empty 204, health paths end with a JSON status body, and everything
    else is passed on to the next handler.

    Errors while building the allow-list or matching never fail the request:
    preflights still get their 204 and other requests continue without CORS
    headers. Observer errors are logged and never change the response.
    """

    def __init__(
        self,
        app: Callable,
        allowed_origins: str | Iterable[str] | None = None,
        policy: OriginPolicy | None = None,
        observer: OriginObserver | None = None,
        health_path: str = "/api/health",
        health_suffix: str = "/health",
        app_version: str = "1.0.0",
        service_state: str = "running",
        clock: Callable[[], str] = utc_timestamp,
    ) -> None:
        super().__init__(app)
        self._allowed_origins = allowed_origins
        self._policy = policy
        self.observer = observer or default_observer()
        self.health_path = health_path
        self.health_suffix = health_suffix
        self.app_version = app_version
        self.service_state = service_state
        self.clock = clock

    @property
    def policy(self) -> OriginPolicy:
        """Allow-list, parsed on first use and then kept for the process."""
        if self._policy is None:
            raw = self._allowed_origins
            if raw is None or isinstance(raw, str):
                patterns = parse_allowed_origins(raw)
            else:
                patterns = tuple(p.strip() for p in raw if p.strip())
            self._policy = OriginPolicy(patterns)
        return self._policy

    def is_health_path(self, path: str) -> bool:
        """Return ``True`` for the liveness path or suffix."""
        return path == self.health_path or path.endswith(self.health_suffix)

    def health_payload(self, timestamp: str, app_id: str) -> dict:
        """Build the JSON body returned for liveness checks."""
        return {
            "status": "ok",
            "timestamp": timestamp,
            "appId": app_id,
            "manifest": self.service_state,
            "version": self.app_version,
        }

    def _notify(self, event: str, *args) -> None:
        """Deliver ``event`` to the observer; observer errors are logged and dropped."""
        try:
            getattr(self.observer, event)(*args)
        except Exception:
            logger.exception("origin observer failed on %s", event)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[override]
        timestamp = self.clock()
        app_id = request.headers.get("x-app-id") or "Unknown"
        origin = request.headers.get("origin")

        try:
            decision = self.policy.decide(origin)
        except Exception as exc:
            self._notify("failure", exc, request)
            if request.method == "OPTIONS":
                return Response(status_code=HTTP_204_NO_CONTENT)
            return await call_next(request)

        allowed = isinstance(decision, Allowed)
        self._notify("decision", origin, allowed, request)
        headers = dict(decision.headers) if allowed else {}

        if request.method == "OPTIONS":
            self._notify("preflight", request)
            return Response(status_code=HTTP_204_NO_CONTENT, headers=headers)

        if self.is_health_path(request.url.path):
            payload = self.health_payload(timestamp, app_id)
            self._notify("liveness", payload, request)
            return JSONResponse(payload, headers=headers)

        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response
