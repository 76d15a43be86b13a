"""
tests/test_health.py -- Integration tests for GET /health.

Covers:
  - 200 response with status and version fields
  - No authentication required
  - The real lifespan opens both stores from settings and closes them
"""

from __future__ import annotations

import logging

from fastapi.testclient import TestClient

import api.main as main_module
from api.main import __version__
from core.config import Settings


def test_health_returns_200(api_client):
    """Health endpoint returns 200 with status and version."""
    resp = api_client.client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "version": __version__}


def test_health_no_auth_required(api_client):
    """Health endpoint ignores a missing or garbage Authorization header."""
    assert api_client.client.get("/health", headers={}).status_code == 200
    assert api_client.client.get("/health", headers={"Authorization": "Bearer a.b"}).status_code == 200


def test_unknown_route_uses_error_envelope(api_client):
    resp = api_client.client.get("/no-such-route")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "http_404"


def test_real_lifespan_opens_and_closes_stores(tmp_path, monkeypatch, caplog):
    """The app's own lifespan wires both stores from settings and logs startup."""
    settings = Settings(
        _env_file=None,
        debug=True,
        auth_db_url=f"sqlite:///{tmp_path}/auth.db",
        ledger_db_url=f"sqlite:///{tmp_path}/ledger.db",
    )
    monkeypatch.setattr(main_module, "_settings", settings)
    monkeypatch.setattr(main_module.app.router, "lifespan_context", main_module.lifespan)

    with caplog.at_level(logging.INFO, logger="fintrack.api"):
        with TestClient(main_module.app) as client:
            assert client.get("/health").status_code == 200
            assert client.app.state.user_store.engine.url.database.endswith("auth.db")

    assert "Stores initialized" in caplog.text
    assert "shutdown complete" in caplog.text
