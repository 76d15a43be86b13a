"""
API request and response models for fintrack REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
ledger/models.py, which own the internal domain representation. Route
handlers map between the two.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ledger.models import Category

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class CategoryTypeEnum(str, Enum):
    income = "income"
    expense = "expense"


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    """Request body for POST /login.

    Both fields are required and non-empty. Password length is bounded only
    to cap request size; the SHA-512/256 pre-hash keeps bcrypt's own 72-byte
    input limit out of play.
    """

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=1024)


class LoginResponse(BaseModel):
    """Response for a successful POST /login."""

    model_config = ConfigDict(frozen=True)

    token: str


class MeResponse(BaseModel):
    """Response for GET /me."""

    model_config = ConfigDict(frozen=True)

    username: str


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


class CategoryCreate(BaseModel):
    """Request body for POST /categories."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    type: CategoryTypeEnum
    description: str = Field(default="", max_length=2000)


class CategoryUpdate(BaseModel):
    """Request body for PATCH /categories/{id}. Omitted fields are left unchanged."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)


class CategoryResponse(BaseModel):
    """A single category as returned by the API."""

    model_config = ConfigDict(frozen=True)

    id: int
    title: str
    type: str
    description: str
    created_at: str

    @classmethod
    def from_category(cls, category: Category) -> "CategoryResponse":
        """Build a CategoryResponse from a ledger Category.

        user_id is omitted: every category route is already scoped to the caller.
        """
        return cls(
            id=category.id,
            title=category.title,
            type=category.type,
            description=category.description,
            created_at=category.created_at,
        )


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
