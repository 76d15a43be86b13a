"""
ledger/store.py -- SQLAlchemy-backed persistence layer for fintrack categories.

Uses SQLAlchemy Core (not ORM) so the dataclass in ledger/models.py remains
the authoritative domain representation. Swapping SQLite for PostgreSQL is a
connection string change, not a rewrite.

Pattern: Repository + Data Mapper. CategoryStore is the repository;
_row_to_category is the mapper. Route handlers never touch SQL directly.

Security: all queries use bound parameters. No f-strings in SQL. Search terms
are bound LIKE parameters, so quotes and SQL fragments in a search string
cannot change the query.

Usage:
    store = CategoryStore("sqlite:///ledger.db")
    category_id = store.create_category(Category(user_id=1, title="Groceries", type="expense"))
    store.list_categories(1, type="expense", description="food")
    store.update_category(category_id, title="Food", description="Weekly shop")
    store.delete_category(category_id)
    store.close()
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, Integer, MetaData, String, Table, Text, create_engine, event, func
from sqlalchemy.engine import Engine

from ledger.models import Category

logger = logging.getLogger("fintrack.ledger")

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

metadata = MetaData()

_categories = Table(
    "categories",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, nullable=False),
    Column("title", String(255), nullable=False),
    Column("type", String(20), nullable=False),
    Column("description", Text, nullable=False, server_default=""),
    Column("created_at", String(32), nullable=False),
    Index("ix_categories_user_type", "user_id", "type"),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _contains(column, term: str):
    """Case-insensitive substring match: lower(column) LIKE %term%."""
    return func.lower(column).like(f"%{term.lower()}%")


def _set_wal_mode(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode for concurrent read safety."""
    dbapi_conn.execute("PRAGMA journal_mode=WAL")


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CategoryStore:
    """Repository for Category entities."""

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _set_wal_mode)
        metadata.create_all(self.engine)

    def create_category(self, category: Category) -> int:
        """Insert a new category and return its assigned database ID."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _categories.insert().values(
                    user_id=category.user_id,
                    title=category.title,
                    type=category.type,
                    description=category.description,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            category_id = result.inserted_primary_key[0]
        logger.info("Created category %d for user %d", category_id, category.user_id)
        return category_id

    def get_category(self, category_id: int) -> Optional[Category]:
        """Fetch a single category by ID. Returns None if not found."""
        with self.engine.connect() as conn:
            row = conn.execute(_categories.select().where(_categories.c.id == category_id)).fetchone()
        return _row_to_category(row) if row is not None else None

    def list_categories(
        self,
        user_id: int,
        type: Optional[str] = None,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> list[Category]:
        """Return a user's categories, oldest first.

        type is an exact match. title and description are case-insensitive
        substring filters; an empty or None filter matches everything.
        """
        query = _categories.select().where(_categories.c.user_id == user_id)
        if type:
            query = query.where(_categories.c.type == type)
        if title:
            query = query.where(_contains(_categories.c.title, title))
        if description:
            query = query.where(_contains(_categories.c.description, description))
        with self.engine.connect() as conn:
            rows = conn.execute(query.order_by(_categories.c.id)).fetchall()
        return [_row_to_category(r) for r in rows]

    def update_category(
        self,
        category_id: int,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Category]:
        """Update title and/or description. Returns the updated row, or None if not found.

        type and user_id are fixed at creation.
        """
        fields = {}
        if title is not None:
            fields["title"] = title
        if description is not None:
            fields["description"] = description
        if fields:
            with self.engine.connect() as conn:
                result = conn.execute(
                    _categories.update().where(_categories.c.id == category_id).values(**fields)
                )
                conn.commit()
            if result.rowcount == 0:
                return None
        return self.get_category(category_id)

    def delete_category(self, category_id: int) -> bool:
        """Delete a category. Returns True if a row was deleted, False if not found."""
        with self.engine.connect() as conn:
            result = conn.execute(_categories.delete().where(_categories.c.id == category_id))
            conn.commit()
        return result.rowcount > 0

    def close(self) -> None:
        """Dispose of the connection pool."""
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Row mapper
# ---------------------------------------------------------------------------


def _row_to_category(row) -> Category:
    return Category(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        type=row.type,
        description=row.description,
        created_at=row.created_at,
    )
