"""
auth/passwords.py -- Two-stage password hashing: SHA-512/256 pre-hash, then bcrypt.

Security design decisions:
  bcrypt only looks at the first 72 bytes of its input. Every password is
  therefore reduced to a fixed-size digest first, and bcrypt runs over that
  digest. Long passwords keep all of their entropy and no input can exceed
  bcrypt's bound.

  The digest is fed to bcrypt as fixed-width lowercase hex (64 ASCII bytes).
  Raw digest bytes are never trimmed or NUL-terminated: a digest that happens
  to contain zero bytes must compare on its full value.

  verify_password() separates three outcomes:
    True               -- the password matches
    False              -- wrong password (a normal outcome)
    PasswordHashError  -- the stored hash itself is unusable (server fault)

Layer rule: no imports from api/ or ledger/.
"""

from __future__ import annotations

import hashlib

import bcrypt

from core.config import get_settings

_PREHASH_ALGORITHM = "sha512_256"


class PasswordHashError(Exception):
    """Raised when a stored hash cannot be compared (malformed or truncated)."""


def prehash_password(plain: str) -> bytes:
    """Return the bcrypt input for a plaintext password.

    Stage one of the scheme: SHA-512/256 over the UTF-8 password, hex encoded.
    Always exactly 64 bytes, which keeps bcrypt's 72-byte truncation out of play.
    """
    digest = hashlib.new(_PREHASH_ALGORITHM, plain.encode("utf-8"))
    return digest.hexdigest().encode("ascii")


def hash_password(plain: str, rounds: int | None = None) -> str:
    """Return a bcrypt hash of the pre-hashed password.

    rounds defaults to Settings.bcrypt_rounds. Tests pass a low value (4) to
    keep the suite fast.
    """
    salt = bcrypt.gensalt(rounds=rounds or get_settings().bcrypt_rounds)
    return bcrypt.hashpw(prehash_password(plain), salt).decode("ascii")


def verify_password(plain: str, stored_hash: str) -> bool:
    """Return True if the plaintext password matches the stored bcrypt hash.

    bcrypt.checkpw compares in constant time. A ValueError from bcrypt means
    the stored value is not a usable bcrypt hash, which is reported as
    PasswordHashError rather than folded into a mismatch.
    """
    try:
        hashed = stored_hash.encode("ascii")
        return bcrypt.checkpw(prehash_password(plain), hashed)
    except ValueError as e:  # includes UnicodeEncodeError
        raise PasswordHashError("stored password hash is malformed") from e
