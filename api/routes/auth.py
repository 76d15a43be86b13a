"""
api/routes/auth.py -- Login and identity REST endpoints.

Routes:
  POST /login  -- username/password login; returns {"token": ...}
  GET  /me     -- the authenticated principal (requires a bearer token)

Login outcomes (see auth/login.py for the stage-by-stage mapping):
  200 token issued
  400 malformed JSON or missing/empty field (rejected before any store access)
  404 unknown username
  401 wrong password
  500 store or signing failure

Cache-Control: no-store is set on every login response. Error responses get it
from the AppError handler in api/main.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from api.models import ErrorResponse, LoginRequest, LoginResponse, MeResponse
from auth.dependencies import get_current_principal
from auth.login import login as login_user
from auth.models import Principal
from auth.store import UserStore

# Auth policy:
# - POST /login: public -- login endpoint must be unauthenticated
# - GET  /me:    requires a valid bearer token (get_current_principal)
router = APIRouter()

_LOGIN_ERRORS = {
    400: {"model": ErrorResponse, "description": "Malformed body"},
    401: {"model": ErrorResponse, "description": "Wrong password"},
    404: {"model": ErrorResponse, "description": "Unknown username"},
    500: {"model": ErrorResponse, "description": "Store or signing failure"},
}


@router.post("/login", response_model=LoginResponse, responses=_LOGIN_ERRORS)
def login(request: Request, response: Response, body: LoginRequest) -> LoginResponse:
    """Authenticate with username and password and return a signed session token.

    Sync handler: the store lookup and bcrypt comparison are blocking, so
    FastAPI runs this in its thread pool.
    """
    user_store: UserStore = request.app.state.user_store
    token = login_user(user_store, body.username, body.password)
    response.headers["Cache-Control"] = "no-store"
    return LoginResponse(token=token)


@router.get("/me", response_model=MeResponse)
def me(principal: Principal = Depends(get_current_principal)) -> MeResponse:
    """Return the identity carried by the caller's bearer token."""
    return MeResponse(username=principal.username)
