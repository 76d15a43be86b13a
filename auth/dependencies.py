"""
auth/dependencies.py -- FastAPI Depends() helpers for authentication.

The token module only reports what it found (a TokenResult). This module is
the routing-layer decision on top of it:

  valid                                    -> proceed with the Principal
  MALFORMED (missing/bad header or token)  -> ValidationError (400)
  BAD_SIGNATURE / EXPIRED / INVALID_CLAIMS -> AuthenticationError (401)

Layer rule: no imports from ledger/.
  auth/dependencies.py may import from fastapi (for Request) because this
  module is part of the FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.models import Principal
from auth.tokens import TokenFailure, authenticate_header
from core.errors import AuthenticationError, ValidationError

logger = logging.getLogger("fintrack.auth")


def get_current_principal(request: Request) -> Principal:
    """Require a valid bearer token.

    Use as a FastAPI dependency:
        @router.get("/protected")
        def route(principal: Principal = Depends(get_current_principal)): ...
    """
    result = authenticate_header(request.headers.get("Authorization"))
    if result.ok:
        return result.principal

    logger.info("Rejected bearer token on %s: %s", request.url.path, result.failure.value)
    if result.failure is TokenFailure.MALFORMED:
        raise ValidationError("Missing or malformed bearer token.")
    raise AuthenticationError("Invalid or expired token.")
