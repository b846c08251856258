import logging
import sys

import pytest

import start_app
from api.app import launcher
from config import get_settings


def test_returns_child_exit_code():
    assert launcher.launch_backend([sys.executable, "-c", "raise SystemExit(3)"]) == 3
    assert launcher.launch_backend([sys.executable, "-c", "pass"]) == 0


def test_child_inherits_environment(tmp_path, monkeypatch):
    out = tmp_path / "env.txt"
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.com")
    code = launcher.launch_backend(
        [
            sys.executable,
            "-c",
            "import os, sys; open(sys.argv[1], 'w').write(os.environ['ALLOWED_ORIGINS'])",
            str(out),
        ]
    )
    assert code == 0
    assert out.read_text() == "https://a.com"


def test_runs_in_given_directory(tmp_path):
    code = launcher.launch_backend(
        [sys.executable, "-c", "open('marker', 'w').close()"], cwd=tmp_path
    )
    assert code == 0
    assert (tmp_path / "marker").exists()


def test_missing_executable_reports_failure(caplog):
    with caplog.at_level(logging.ERROR, logger="api.launcher"):
        assert launcher.launch_backend(["definitely-not-a-real-binary-xyz"]) == 1
    assert "failed to start backend" in caplog.text


def test_empty_command_reports_failure():
    assert launcher.launch_backend([]) == 1


def test_default_command_from_settings(monkeypatch):
    monkeypatch.setenv("BACKEND_COMMAND", f'"{sys.executable}" -c "raise SystemExit(5)"')
    get_settings.cache_clear()
    try:
        assert launcher.launch_backend() == 5
    finally:
        get_settings.cache_clear()


def test_start_app_backend_flag_exits_with_child_code(monkeypatch):
    monkeypatch.setattr(launcher, "launch_backend", lambda: 7)
    monkeypatch.setattr(start_app, "load_dotenv", lambda: False)
    with pytest.raises(SystemExit) as exc:
        start_app.main(["--backend"])
    assert exc.value.code == 7


def test_start_app_serves_api(monkeypatch):
    calls = {}

    def fake_run(target, **kwargs):
        calls["target"] = target
        calls.update(kwargs)

    monkeypatch.setattr(start_app.uvicorn, "run", fake_run)
    monkeypatch.setattr(start_app, "load_dotenv", lambda: False)
    start_app.main(["--port", "9001"])
    assert calls["target"] == "api.app.main:app"
    assert calls["port"] == 9001
