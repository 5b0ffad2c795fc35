"""Tests for the command-line entry point."""

from __future__ import annotations

import json

import pytest

import marineboard.cli as cli
from marineboard.exceptions import SourceUnavailable


@pytest.fixture(autouse=True)
def _quiet_logging(monkeypatch):
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


def test_snapshot_prints_payload(monkeypatch, capsys) -> None:
    async def fake_snapshot(settings):
        return {"buoys": {}, "degraded": ["waves"]}

    monkeypatch.setattr(cli, "_snapshot", fake_snapshot)
    assert cli.main(["snapshot"]) == 0
    assert json.loads(capsys.readouterr().out) == {"buoys": {}, "degraded": ["waves"]}


def test_refresh_forecast(monkeypatch, capsys) -> None:
    async def fake_refresh(settings):
        return {"ok": True, "fetchedAt": "2024-01-15T00:00:00+00:00", "samples": 3}

    monkeypatch.setattr(cli, "_refresh", fake_refresh)
    assert cli.main(["refresh-forecast"]) == 0
    assert json.loads(capsys.readouterr().out)["samples"] == 3


def test_refresh_forecast_failure(monkeypatch, capsys) -> None:
    async def fake_refresh(settings):
        raise SourceUnavailable("quota exhausted")

    monkeypatch.setattr(cli, "_refresh", fake_refresh)
    assert cli.main(["refresh-forecast"]) == 1
    err = json.loads(capsys.readouterr().err)
    assert err == {"ok": False, "error": "quota exhausted"}


def test_serve_uses_settings(monkeypatch) -> None:
    seen = {}
    monkeypatch.setattr(cli, "serve", lambda settings, host, port: seen.update(host=host, port=port))
    assert cli.main(["serve", "--port", "9000"]) == 0
    assert seen == {"host": None, "port": 9000}


def test_command_required() -> None:
    with pytest.raises(SystemExit):
        cli.main([])
