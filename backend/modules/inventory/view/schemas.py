from enum import Enum
from pydantic import BaseModel
from typing import Optional, List

from modules.inventory.items.schemas import InventoryItem


class SortKey(str, Enum):
    NAME = "name"
    PRICE_ASC = "price_asc"
    PRICE_DESC = "price_desc"
    DATE_ASC = "date_asc"
    DATE_DESC = "date_desc"


class ViewParams(BaseModel):
    search_term: str = ""
    category_filter: str = "All"
    sort_key: SortKey = SortKey.NAME


class InventoryGroup(BaseModel):
    """`key` is unique per view even when a category is named like the uncategorized label."""
    key: str
    label: str
    category_id: Optional[str] = None
    uncategorized: bool = False
    items: List[InventoryItem]


class GroupedView(BaseModel):
    groups: List[InventoryGroup]
    total_items: int
