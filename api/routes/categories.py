"""
api/routes/categories.py -- Income/expense category routes.

Routes:
  POST   /categories          -- create a category for the caller
  GET    /categories          -- list the caller's categories (?type=&title=&description=)
  GET    /categories/{id}     -- category detail
  PATCH  /categories/{id}     -- update title and/or description
  DELETE /categories/{id}     -- delete

Every route requires a bearer token. Categories are scoped to the caller's
user ID: another user's category is reported as 404, never 403, so IDs of
other users' data are not confirmed to exist.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from api.models import CategoryCreate, CategoryResponse, CategoryTypeEnum, CategoryUpdate
from auth.dependencies import get_current_principal
from auth.models import Principal
from auth.store import CredentialStoreError, UserNotFoundError, UserStore
from core.errors import AuthenticationError, InternalError, NotFoundError
from ledger.models import Category
from ledger.store import CategoryStore

router = APIRouter(prefix="/categories")


def _owner_id(request: Request, principal: Principal) -> int:
    """Resolve the principal's user ID.

    A valid token whose user has since been removed is no longer a usable
    credential, so that case is unauthorized rather than not-found.
    """
    user_store: UserStore = request.app.state.user_store
    try:
        return user_store.get_user_id(principal.username)
    except UserNotFoundError:
        raise AuthenticationError("Invalid or expired token.") from None
    except CredentialStoreError as e:
        raise InternalError() from e


def _owned_category(request: Request, category_id: int, owner_id: int) -> Category:
    store: CategoryStore = request.app.state.category_store
    category = store.get_category(category_id)
    if category is None or category.user_id != owner_id:
        raise NotFoundError(f"Category {category_id} not found.")
    return category


# ---------------------------------------------------------------------------
# POST /categories
# ---------------------------------------------------------------------------


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    request: Request,
    body: CategoryCreate,
    principal: Principal = Depends(get_current_principal),
) -> CategoryResponse:
    """Create a category owned by the caller."""
    store: CategoryStore = request.app.state.category_store
    category_id = store.create_category(
        Category(
            user_id=_owner_id(request, principal),
            title=body.title,
            type=body.type.value,
            description=body.description,
        )
    )
    return CategoryResponse.from_category(store.get_category(category_id))


# ---------------------------------------------------------------------------
# GET /categories
# ---------------------------------------------------------------------------


@router.get("", response_model=list[CategoryResponse])
def list_categories(
    request: Request,
    type: Optional[CategoryTypeEnum] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    principal: Principal = Depends(get_current_principal),
) -> list[CategoryResponse]:
    """List the caller's categories, optionally filtered.

    type matches exactly; title and description match case-insensitive substrings.
    """
    store: CategoryStore = request.app.state.category_store
    categories = store.list_categories(
        _owner_id(request, principal),
        type=type.value if type else None,
        title=title,
        description=description,
    )
    return [CategoryResponse.from_category(c) for c in categories]


# ---------------------------------------------------------------------------
# GET / PATCH / DELETE /categories/{category_id}
# ---------------------------------------------------------------------------


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    request: Request,
    category_id: int,
    principal: Principal = Depends(get_current_principal),
) -> CategoryResponse:
    category = _owned_category(request, category_id, _owner_id(request, principal))
    return CategoryResponse.from_category(category)


@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    request: Request,
    category_id: int,
    body: CategoryUpdate,
    principal: Principal = Depends(get_current_principal),
) -> CategoryResponse:
    """Update title and/or description. type is fixed at creation."""
    _owned_category(request, category_id, _owner_id(request, principal))
    store: CategoryStore = request.app.state.category_store
    updated = store.update_category(category_id, title=body.title, description=body.description)
    if updated is None:
        # Deleted between the ownership check and the update.
        raise NotFoundError(f"Category {category_id} not found.")
    return CategoryResponse.from_category(updated)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    request: Request,
    category_id: int,
    principal: Principal = Depends(get_current_principal),
) -> Response:
    _owned_category(request, category_id, _owner_id(request, principal))
    store: CategoryStore = request.app.state.category_store
    if not store.delete_category(category_id):
        raise NotFoundError(f"Category {category_id} not found.")
    return Response(status_code=204)
