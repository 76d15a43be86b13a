"""
tests/conftest.py -- Shared test fixtures for fintrack.

This module provides:
  - _make_test_stores(): isolated in-memory DBs for the auth and ledger stores
  - _patch_lifespan(): wires test stores into app.state, bypassing real startup
  - api_client: TestClient plus a seeded user ("validUser" / "validPassword")

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs sync route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker thread.

DEBUG and BCRYPT_ROUNDS must be set before any app import so get_settings()
auto-generates SECRET_KEY and hashes stay cheap to compute.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager
from dataclasses import dataclass

# CRITICAL: Set before any auth/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.passwords import hash_password
from auth.store import UserStore
from auth.tokens import issue_token
from ledger.store import CategoryStore
from tests.factories import VALID_EMAIL, VALID_PASSWORD, VALID_USERNAME

# ---------------------------------------------------------------------------
# Store helpers
# ---------------------------------------------------------------------------


def _make_test_stores(db_suffix: str) -> tuple[UserStore, CategoryStore]:
    """Create isolated named shared-memory SQLite stores.

    Args:
        db_suffix: Unique string appended to the DB name so test modules
                   don't share state.
    """
    auth_url = f"sqlite:///file:test_auth_{db_suffix}?mode=memory&cache=shared&uri=true"
    ledger_url = f"sqlite:///file:test_ledger_{db_suffix}?mode=memory&cache=shared&uri=true"
    return UserStore(auth_url), CategoryStore(ledger_url)


def _patch_lifespan(user_store: UserStore, category_store: CategoryStore):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.user_store = user_store
        app.state.category_store = category_store
        yield

    return test_lifespan


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@dataclass
class ApiContext:
    client: TestClient
    token: str
    user_id: int
    user_store: UserStore
    category_store: CategoryStore


@pytest.fixture(scope="module")
def api_client(request) -> Generator[ApiContext, None, None]:
    """Yield an ApiContext for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so tests
    hit real route handlers but use isolated in-memory stores. validUser is
    created before the client starts and a token is issued for it.
    """
    suffix = request.module.__name__.rsplit(".", 1)[-1]
    user_store, category_store = _make_test_stores(suffix)
    uid = user_store.create_user(VALID_USERNAME, hash_password(VALID_PASSWORD), VALID_EMAIL)
    token = issue_token(VALID_USERNAME)

    app.router.lifespan_context = _patch_lifespan(user_store, category_store)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield ApiContext(client, token, uid, user_store, category_store)

    category_store.close()
    user_store.close()
