from enum import Enum
from pydantic import BaseModel
from typing import Optional, Dict
from datetime import datetime


class InventoryStatus(str, Enum):
    AVAILABLE = "available"
    RENTED = "rented"
    MAINTENANCE = "maintenance"
    LOST = "lost"


class InventoryItem(BaseModel):
    """A piece of studio equipment. `category` is a category name, not an id."""
    id: str
    name: str
    category: str
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[str] = None  # ISO YYYY-MM-DD
    price: float = 0
    status: InventoryStatus = InventoryStatus.AVAILABLE
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


# Inputs: status stays a plain str so the service can report the allowed values
class InventoryItemCreateIn(BaseModel):
    name: str
    category: str
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[str] = None
    price: float = 0
    status: str = InventoryStatus.AVAILABLE.value
    notes: Optional[str] = None


class InventoryItemUpdateIn(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    serial_number: Optional[str] = None
    purchase_date: Optional[str] = None
    price: Optional[float] = None
    status: Optional[str] = None
    notes: Optional[str] = None


# Outputs
class InventorySummary(BaseModel):
    total_items: int
    total_value: float
    by_status: Dict[str, int]
