from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class Category(BaseModel):
    """An equipment category; items join to it by name."""
    id: str
    name: str
    order_index: int
    created_at: Optional[datetime] = None


# Inputs
class CategoryCreateIn(BaseModel):
    name: str


class CategoryRenameIn(BaseModel):
    name: str


class CategoryReorderIn(BaseModel):
    ordered_ids: List[str]


# Outputs
class ReorderOutcome(BaseModel):
    """Result of a two-phase reorder: the confirmed order, or the snapshot to roll back to."""
    ok: bool
    categories: List[Category]
    reason: Optional[str] = None
    error: Optional[str] = None
