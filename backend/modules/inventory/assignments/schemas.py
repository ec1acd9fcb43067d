from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from modules.inventory.items.schemas import InventoryItem


class ProjectAssignment(BaseModel):
    """Link between one inventory item and one project."""
    id: str
    project_id: str
    inventory_item_id: str
    quantity: int = 1
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class ProjectAssignmentDetail(ProjectAssignment):
    inventory_item: Optional[InventoryItem] = None


# Inputs
class AssignmentCreateIn(BaseModel):
    inventory_item_id: str
    quantity: int = 1
    notes: Optional[str] = None
