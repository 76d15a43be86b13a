"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores, the token
module and routes do the work.

Layer rule: no imports from api/ or ledger/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserRecord:
    """A stored user, owned by the credential store and read-only elsewhere.

    password_hash is bcrypt output computed over the password pre-hash
    (see auth/passwords.py). It is never the plaintext nor a reversible
    encoding of it.
    """

    username: str
    password_hash: str
    email: str
    id: int | None = None
    created_at: str | None = None  # ISO 8601, set by the store on insert


@dataclass(frozen=True)
class Claims:
    """Payload embedded in a signed session token. Never persisted."""

    username: str
    expires_at: datetime


@dataclass(frozen=True)
class Principal:
    """The authenticated identity a protected route proceeds with."""

    username: str
