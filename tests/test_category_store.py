"""Unit tests for ledger/store.py -- CategoryStore CRUD and search filters.

Each test gets a fresh in-memory SQLite store.
"""

import pytest

from ledger.models import Category
from ledger.store import CategoryStore


@pytest.fixture
def store():
    s = CategoryStore("sqlite:///:memory:")
    yield s
    s.close()


def _add(store: CategoryStore, user_id: int, title: str, type: str = "expense", description: str = "") -> int:
    return store.create_category(Category(user_id=user_id, title=title, type=type, description=description))


def test_create_and_get(store: CategoryStore) -> None:
    category_id = _add(store, 1, "Groceries", description="Weekly food shop")
    category = store.get_category(category_id)
    assert category is not None
    assert category.id == category_id
    assert category.user_id == 1
    assert category.title == "Groceries"
    assert category.type == "expense"
    assert category.description == "Weekly food shop"
    assert category.created_at


def test_get_missing_returns_none(store: CategoryStore) -> None:
    assert store.get_category(999) is None


def test_list_is_scoped_to_user(store: CategoryStore) -> None:
    _add(store, 1, "Rent")
    _add(store, 2, "Rent")
    assert [c.user_id for c in store.list_categories(1)] == [1]
    assert store.list_categories(3) == []


def test_list_ordered_by_creation(store: CategoryStore) -> None:
    ids = [_add(store, 1, title) for title in ("b", "a", "c")]
    assert [c.id for c in store.list_categories(1)] == ids


def test_filter_by_type(store: CategoryStore) -> None:
    _add(store, 1, "Salary", type="income")
    _add(store, 1, "Rent", type="expense")
    assert [c.title for c in store.list_categories(1, type="income")] == ["Salary"]


def test_title_filter_is_case_insensitive_substring(store: CategoryStore) -> None:
    _add(store, 1, "Groceries")
    _add(store, 1, "Rent")
    assert [c.title for c in store.list_categories(1, title="ROCER")] == ["Groceries"]


def test_description_filter(store: CategoryStore) -> None:
    _add(store, 1, "Groceries", description="Supermarket and bakery")
    _add(store, 1, "Fuel", description="Car")
    assert [c.title for c in store.list_categories(1, description="bakery")] == ["Groceries"]


def test_empty_filters_match_everything(store: CategoryStore) -> None:
    _add(store, 1, "Groceries")
    _add(store, 1, "Salary", type="income")
    assert len(store.list_categories(1, type="", title="", description="")) == 2


def test_search_string_is_not_sql(store: CategoryStore) -> None:
    _add(store, 1, "Groceries")
    assert store.list_categories(1, title="' OR '1'='1") == []
    assert store.list_categories(1, description="x'; DROP TABLE categories; --") == []
    assert len(store.list_categories(1)) == 1


def test_update_title_and_description(store: CategoryStore) -> None:
    category_id = _add(store, 1, "Groceries", description="old")
    updated = store.update_category(category_id, title="Food", description="new")
    assert updated is not None
    assert (updated.title, updated.description) == ("Food", "new")
    assert updated.type == "expense"


def test_partial_update_leaves_other_fields(store: CategoryStore) -> None:
    category_id = _add(store, 1, "Groceries", description="keep me")
    updated = store.update_category(category_id, title="Food")
    assert updated.description == "keep me"


def test_update_missing_returns_none(store: CategoryStore) -> None:
    assert store.update_category(999, title="x") is None
    assert store.update_category(999) is None


def test_delete(store: CategoryStore) -> None:
    category_id = _add(store, 1, "Groceries")
    assert store.delete_category(category_id) is True
    assert store.get_category(category_id) is None
    assert store.delete_category(category_id) is False
