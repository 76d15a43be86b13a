"""
auth/tokens.py -- Session token issuance, validation, and bearer header extraction.

Security design decisions:
  Tokens: python-jose with HS256. Tokens carry {"username", "exp"} where exp
       is issued_at + Settings.token_ttl_minutes as Unix seconds. They are
       stateless: nothing is stored server-side, there is no revocation list
       and no refresh. A token is issued once and is only ever accepted or
       rejected afterwards.

  Validation is an explicit state machine:

         Received -> Parsed -> SignatureChecked -> ClaimsChecked -> Valid
                       |              |                  |
                   MALFORMED    BAD_SIGNATURE   EXPIRED / INVALID_CLAIMS

       validate_token() returns a TokenResult instead of raising or calling
       into the route. The routing layer (auth/dependencies.py) decides what
       a failure means over HTTP: MALFORMED is a client error (400), every
       other failure is unauthorized (401).

  Structural parsing is deliberately shallow: segment count, non-empty
       segments, and a decodable JSON header. Damage to the payload or
       signature segments surfaces as BAD_SIGNATURE, so a tampered token is
       always unauthorized rather than merely malformed. That includes a
       non-canonical base64url spelling of either segment, which the decoder
       alone would accept as the same bytes.

  SECRET_KEY: sourced from core.config.get_settings(), shared by issuer and
       validator, never mutated after startup.

Layer rule: no imports from api/ or ledger/.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum

from jose import jws, jwt
from jose.exceptions import JOSEError, JWSError
from jose.utils import base64url_decode, base64url_encode

from auth.models import Claims, Principal
from core.config import get_settings

logger = logging.getLogger("fintrack.auth")

ALGORITHM = "HS256"

_BEARER_PREFIX = "Bearer "


class TokenSigningError(Exception):
    """Raised when a token cannot be signed (e.g. misconfigured secret)."""


class TokenFailure(str, Enum):
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"
    INVALID_CLAIMS = "invalid_claims"


@dataclass(frozen=True)
class TokenResult:
    """Outcome of validating a token: a principal or a failure, never both."""

    principal: Principal | None = None
    failure: TokenFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def valid(cls, principal: Principal) -> "TokenResult":
        return cls(principal=principal)

    @classmethod
    def invalid(cls, failure: TokenFailure) -> "TokenResult":
        return cls(failure=failure)


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Issue
# ---------------------------------------------------------------------------


def build_claims(username: str, now: datetime | None = None) -> Claims:
    """Return fresh claims expiring one TTL after now.

    exp is truncated to whole seconds because that is what the wire format
    carries. issued_at is truncated the same way so exp - issued_at == TTL.
    """
    issued_at = _now(now).replace(microsecond=0)
    ttl = timedelta(minutes=get_settings().token_ttl_minutes)
    return Claims(username=username, expires_at=issued_at + ttl)


def issue_token(username: str, now: datetime | None = None) -> str:
    """Sign a session token for an authenticated username.

    Raises TokenSigningError on any jose failure. This only happens with a
    broken configuration and is never retried.
    """
    claims = build_claims(username, now)
    payload = {
        "username": claims.username,
        "exp": int(claims.expires_at.timestamp()),
    }
    try:
        return jwt.encode(payload, get_settings().secret_key, algorithm=ALGORITHM)
    except JOSEError as e:
        logger.error("Token signing failed: %s", type(e).__name__)
        raise TokenSigningError("unable to sign session token") from e


# ---------------------------------------------------------------------------
# Validate
# ---------------------------------------------------------------------------


def _is_well_formed(token: str) -> bool:
    """Received -> Parsed: three non-empty segments and a JSON object header."""
    segments = token.split(".")
    if len(segments) != 3 or not all(segments):
        return False
    try:
        header = json.loads(base64url_decode(segments[0].encode("ascii")))
    except ValueError:  # bad ascii, bad base64, bad utf-8, bad JSON
        return False
    return isinstance(header, dict)


def _is_canonical(segment: str) -> bool:
    """True if segment is the exact base64url encoding of the bytes it decodes to.

    The decoder ignores the unused low bits of the final character, so several
    spellings of a segment can decode to the same bytes. Only the canonical
    spelling is accepted.
    """
    try:
        raw = base64url_decode(segment.encode("ascii"))
    except ValueError:
        return False
    return base64url_encode(raw).decode("ascii") == segment


def _parse_claims(payload: bytes) -> Claims | None:
    """Decode the verified payload into Claims. None if a field is absent or wrong."""
    try:
        data = json.loads(payload)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    username = data.get("username")
    exp = data.get("exp")
    if not isinstance(username, str) or not username:
        return None
    # bool is an int subclass; reject it explicitly.
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    try:
        expires_at = datetime.fromtimestamp(exp, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None
    return Claims(username=username, expires_at=expires_at)


def validate_token(token: str, now: datetime | None = None) -> TokenResult:
    """Run a token through Parsed -> SignatureChecked -> ClaimsChecked.

    Pure function of (token, secret, now): validating the same token twice at
    the same instant always yields the same result.
    """
    if not token or not _is_well_formed(token):
        return TokenResult.invalid(TokenFailure.MALFORMED)

    _, payload_segment, signature_segment = token.split(".")
    if not (_is_canonical(payload_segment) and _is_canonical(signature_segment)):
        return TokenResult.invalid(TokenFailure.BAD_SIGNATURE)

    try:
        payload = jws.verify(token, get_settings().secret_key, algorithms=[ALGORITHM])
    except JWSError:
        return TokenResult.invalid(TokenFailure.BAD_SIGNATURE)

    claims = _parse_claims(payload)
    if claims is None:
        return TokenResult.invalid(TokenFailure.INVALID_CLAIMS)
    if _now(now) > claims.expires_at:
        return TokenResult.invalid(TokenFailure.EXPIRED)

    return TokenResult.valid(Principal(username=claims.username))


# ---------------------------------------------------------------------------
# Authorization header
# ---------------------------------------------------------------------------


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an "Authorization: Bearer <token>" header value.

    Returns None when the header is missing, lacks the "Bearer " prefix, or
    has nothing after the prefix. All three are malformed requests.
    """
    if not authorization or not authorization.startswith(_BEARER_PREFIX):
        return None
    token = authorization[len(_BEARER_PREFIX) :]
    return token or None


def authenticate_header(authorization: str | None, now: datetime | None = None) -> TokenResult:
    """Extract the bearer token from a header value and validate it."""
    token = extract_bearer_token(authorization)
    if token is None:
        return TokenResult.invalid(TokenFailure.MALFORMED)
    return validate_token(token, now)
