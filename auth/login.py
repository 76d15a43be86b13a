"""
auth/login.py -- Login orchestration: lookup, password check, token issuance.

Stages (the request body has already been parsed by the HTTP layer):

  UserLookedUp     UserNotFoundError      -> NotFoundError        (404)
                   CredentialStoreError   -> InternalError        (500)
  PasswordVerified mismatch               -> AuthenticationError  (401)
                   PasswordHashError      -> InternalError        (500)
  TokenIssued      TokenSigningError      -> InternalError        (500)

The first failing stage ends the login. Nothing is retried and no later
stage runs after a failure. Error messages are generic; the username and the
failing stage go to the log, never the password, hash, or store error text.

Layer rule: no imports from api/ or ledger/.
"""

from __future__ import annotations

import logging
from datetime import datetime

from auth.passwords import PasswordHashError, verify_password
from auth.store import CredentialStore, CredentialStoreError, UserNotFoundError
from auth.tokens import TokenSigningError, issue_token
from core.errors import AuthenticationError, InternalError, NotFoundError

logger = logging.getLogger("fintrack.auth")


def login(store: CredentialStore, username: str, password: str, now: datetime | None = None) -> str:
    """Authenticate username/password against the store and return a signed token.

    Raises NotFoundError, AuthenticationError, or InternalError.
    """
    try:
        user = store.get_user(username)
    except UserNotFoundError:
        logger.info("Login failed: unknown user %r", username)
        raise NotFoundError("User not found.") from None
    except CredentialStoreError as e:
        logger.error("Login failed: credential store error for %r", username)
        raise InternalError() from e

    try:
        matched = verify_password(password, user.password_hash)
    except PasswordHashError as e:
        logger.error("Login failed: stored hash for %r is malformed", username)
        raise InternalError() from e
    if not matched:
        logger.info("Login failed: wrong password for %r", username)
        raise AuthenticationError("Invalid username or password.")

    try:
        token = issue_token(user.username, now)
    except TokenSigningError as e:
        raise InternalError() from e

    logger.info("Login succeeded for %r", username)
    return token
