"""
auth/store.py -- SQLAlchemy Core persistence layer for user credentials.

Pattern: Repository + Data Mapper (same as ledger/store.py).
UserStore is the repository; _row_to_user is the mapper.
Route and orchestrator code never touches SQL directly.

Contract consumed by the login orchestrator:
  get_user(username) returns a UserRecord, raises UserNotFoundError when no
  such user exists, and raises CredentialStoreError for every other database
  failure. The two error types are all a caller needs to tell "not found"
  apart from "the store is broken". No retry or backoff happens here.

Security:
  All queries use bound parameters. No f-strings in SQL.

DB path: auth/fintrack_auth.db unless AUTH_DB_URL is set.

Layer rule: no imports from api/ or ledger/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import Column, Integer, MetaData, String, Table, Text, create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from auth.models import UserRecord

logger = logging.getLogger("fintrack.auth")

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class UserNotFoundError(LookupError):
    """No user exists with the requested username."""


class CredentialStoreError(Exception):
    """The store failed for a reason other than "not found"."""


class CredentialStore(Protocol):
    """What the login orchestrator needs from a user store."""

    def get_user(self, username: str) -> UserRecord: ...


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("password_hash", Text, nullable=False),  # bcrypt over the SHA-512/256 pre-hash
    Column("email", String(255), nullable=False, unique=True),
    Column("created_at", String(32), nullable=False),
)


# ---------------------------------------------------------------------------
# WAL mode
# ---------------------------------------------------------------------------


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety.

    Set per-connection because SQLite PRAGMAs are not inherited by new
    connections from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _row_to_user(row) -> UserRecord:
    return UserRecord(
        id=row.id,
        username=row.username,
        password_hash=row.password_hash,
        email=row.email,
        created_at=row.created_at,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for UserRecord entities.

    Usage:
        store = UserStore()
        store.create_user("alice", hash_password("secret"), "alice@example.com")
        user = store.get_user("alice")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        _metadata.create_all(self.engine)

    def create_user(self, username: str, password_hash: str, email: str) -> int:
        """Insert a new user and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the username or email already
        exists. The CLI reports that as a duplicate.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _users.insert().values(
                    username=username,
                    password_hash=password_hash,
                    email=email,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_user(self, username: str) -> UserRecord:
        """Look up a user by exact username (case-sensitive).

        Raises UserNotFoundError if absent, CredentialStoreError on any
        database failure. The original SQLAlchemy error is chained for the
        server log and never reaches the client.
        """
        try:
            with self.engine.connect() as conn:
                row = conn.execute(_users.select().where(_users.c.username == username)).fetchone()
        except SQLAlchemyError as e:
            logger.error("User lookup failed: %s", e)
            raise CredentialStoreError("user lookup failed") from e
        if row is None:
            raise UserNotFoundError(username)
        return _row_to_user(row)

    def get_user_id(self, username: str) -> int:
        """Return the database ID for a username. Same errors as get_user()."""
        return self.get_user(username).id

    def close(self) -> None:
        """Dispose of the connection pool."""
        self.engine.dispose()
