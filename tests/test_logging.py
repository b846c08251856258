import json
import logging
import random

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.app.middlewares.logging import LoggingMiddleware
from api.app.middlewares.request_id import RequestIdMiddleware, resolve_request_id
from api.app.obs.logging import JsonFormatter
from conftest import make_app


def _api_messages(caplog):
    return [r.getMessage() for r in caplog.records if r.name == "api"]


def _make_app():
    test_app = make_app("https://a.com")
    test_app.add_middleware(LoggingMiddleware)
    test_app.add_middleware(RequestIdMiddleware)

    @test_app.get("/boom")
    async def boom():
        raise RuntimeError("kaboom")

    return test_app


def test_request_id_propagation(monkeypatch, caplog):
    monkeypatch.setattr("api.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        resp = client.get("/api/orders", headers={"X-Request-ID": "abc"})
    assert resp.headers["X-Request-ID"] == "abc"
    data = json.loads(_api_messages(caplog)[1])
    assert data["req_id"] == "abc"
    assert data["cors"] is False


def test_inbound_log_records_origin(monkeypatch, caplog):
    monkeypatch.setattr("api.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        client.get(
            "/api/orders", headers={"Origin": "https://a.com", "X-App-ID": "web"}
        )
    inbound = json.loads(_api_messages(caplog)[0])
    outbound = json.loads(_api_messages(caplog)[1])
    assert inbound["origin"] == "https://a.com"
    assert inbound["app_id"] == "web"
    assert outbound["cors"] is True
    assert outbound["status"] == 200


def test_invalid_request_id_replaced(monkeypatch):
    client = TestClient(_make_app())
    resp = client.get("/api/orders", headers={"X-Request-ID": "bad id with spaces"})
    rid = resp.headers["X-Request-ID"]
    assert rid != "bad id with spaces"
    assert len(rid) == 36


def test_resolve_request_id_limits_length():
    assert resolve_request_id("a" * 128) == "a" * 128
    assert resolve_request_id("a" * 129) != "a" * 129
    assert resolve_request_id(None)


def test_unhandled_error_logged_with_error_id(monkeypatch, caplog):
    monkeypatch.setattr("api.app.middlewares.logging.LOG_SAMPLE_2XX", 1)
    client = TestClient(_make_app(), raise_server_exceptions=False)
    with caplog.at_level(logging.INFO, logger="api"):
        resp = client.get("/boom")
    assert resp.status_code == 500
    assert resp.json()["error_id"]
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_2xx_sampling(monkeypatch, caplog):
    monkeypatch.setattr("api.app.middlewares.logging.LOG_SAMPLE_2XX", 0.1)
    random.seed(1)
    client = TestClient(_make_app())
    with caplog.at_level(logging.INFO, logger="api"):
        for _ in range(100):
            client.get("/api/orders")
    logged = len([m for m in _api_messages(caplog) if '"route"' in m])
    assert 5 <= logged <= 15


def test_json_formatter_redacts_bearer_tokens():
    formatter = JsonFormatter()
    record = logging.LogRecord(
        "api",
        logging.INFO,
        __file__,
        0,
        "forwarding Authorization: Bearer abc.def-123 for origin",
        (),
        None,
    )
    record.origin = "https://a.com"
    data = json.loads(formatter.format(record))
    assert "abc.def-123" not in data["msg"]
    assert "Bearer ***" in data["msg"]
    assert data["origin"] == "https://a.com"
    assert data["ts"].endswith("Z")
