# routes_metrics.py

"""Prometheus metrics and /metrics endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest

# Counters
cors_decisions_total = Counter(
    "cors_decisions_total", "Origin allow-list decisions", ["outcome"]
)
cors_decisions_total.labels(outcome="allowed").inc(0)
cors_decisions_total.labels(outcome="blocked").inc(0)

cors_failures_total = Counter(
    "cors_failures_total", "Origin checks recovered after an internal error"
)
cors_failures_total.inc(0)

cors_preflight_total = Counter("cors_preflight_total", "Preflight requests answered")
cors_preflight_total.inc(0)

liveness_checks_total = Counter("liveness_checks_total", "Liveness checks answered")
liveness_checks_total.inc(0)

router = APIRouter()


@router.get("/metrics")
async def metrics_endpoint() -> Response:
    """Expose Prometheus metrics."""
    data = generate_latest()
    return Response(data, media_type=CONTENT_TYPE_LATEST)
