"""
tests/factories.py -- Test data helpers shared across test modules.

random_string / random_email generate throwaway usernames and addresses.
make_token signs arbitrary claims so tests can build tokens the issuer would
never produce (expired, wrong secret, missing claims, foreign algorithm).
"""

from __future__ import annotations

import random
import string
from datetime import datetime, timedelta, timezone

from jose import jwt

from core.config import get_settings

VALID_USERNAME = "validUser"
VALID_PASSWORD = "validPassword"
VALID_EMAIL = "valid@example.com"

ALPHABET = string.ascii_letters


def random_string(length: int, alphabet: str = ALPHABET) -> str:
    """Return a random string of the given length. Negative lengths give ""."""
    if length <= 0:
        return ""
    return "".join(random.choice(alphabet) for _ in range(length))


def random_email(local_length: int) -> str:
    return f"{random_string(local_length)}@email.com"


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def make_token(
    claims: dict,
    secret: str | None = None,
    algorithm: str = "HS256",
) -> str:
    """Sign claims with the app secret (or the given one) via python-jose."""
    return jwt.encode(claims, secret or get_settings().secret_key, algorithm=algorithm)


def exp_from_now(delta: timedelta) -> int:
    return int((datetime.now(timezone.utc) + delta).timestamp())
