"""
ledger/models.py -- Domain dataclasses for the fintrack ledger.

Pure data containers with zero logic. Filtering and persistence live in
ledger/store.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Category:
    """A user-defined income or expense category.

    user_id is the owning user's database ID from the auth store. The two
    stores live in separate databases, so there is no foreign key; the API
    layer scopes every query to the authenticated user's ID.

    id is None before the record is written to the database.
    """

    user_id: int
    title: str
    type: str  # "income" | "expense"
    description: str = ""
    id: Optional[int] = None
    created_at: str = ""  # ISO 8601, set by store on insert
