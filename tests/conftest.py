import os
import sys
from pathlib import Path

import pytest
from fastapi import FastAPI

sys.path.append(str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("ALLOWED_ORIGINS", "http://example.com")
os.environ.setdefault("LOG_SAMPLE_2XX", "1")
os.environ.pop("ERROR_DSN", None)

from api.app.middlewares.cors import OriginAccessMiddleware  # noqa: E402

FIXED_TS = "2024-05-01T12:00:00.000Z"


class RecordingObserver:
    """Collect filter events so tests can assert on decisions."""

    def __init__(self):
        self.decisions = []
        self.preflights = []
        self.liveness_payloads = []
        self.failures = []

    def decision(self, origin, allowed, request):
        self.decisions.append((origin, allowed, request.url.path))

    def preflight(self, request):
        self.preflights.append(request.url.path)

    def liveness(self, payload, request):
        self.liveness_payloads.append(dict(payload))

    def failure(self, exc, request):
        self.failures.append(exc)


def make_app(allowed_origins="", observer=None, **kwargs) -> FastAPI:
    test_app = FastAPI()
    test_app.add_middleware(
        OriginAccessMiddleware,
        allowed_origins=allowed_origins,
        observer=observer or RecordingObserver(),
        clock=lambda: FIXED_TS,
        **kwargs,
    )

    @test_app.get("/api/orders")
    async def orders():
        return {"orders": []}

    @test_app.post("/api/orders")
    async def create_order():
        return {"id": 1}

    return test_app


@pytest.fixture
def observer():
    return RecordingObserver()
