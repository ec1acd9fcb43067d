from __future__ import annotations
from typing import Any, Dict, List, Optional
from datetime import date
import logging
import math
import re

from common.utils import clean_optional_str
from core.errors import NotFoundError, ValidationError
from .repo import InventoryRepo, WRITABLE_FIELDS
from .schemas import InventoryItem, InventoryStatus, InventorySummary

logger = logging.getLogger(__name__)

STATUS_VALUES = [s.value for s in InventoryStatus]
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_OPTIONAL_TEXT = ("brand", "model", "serial_number", "notes")


def _required_text(fields: Dict[str, Any], key: str, label: str) -> str:
    value = (fields.get(key) or "")
    value = str(value).strip()
    if not value:
        raise ValidationError(f"{label} is required", {"field": key})
    return value


def _price(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        raise ValidationError("Price must be a number", {"field": "price", "value": value})
    try:
        price = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Price must be a number", {"field": "price", "value": value})
    if math.isnan(price) or math.isinf(price) or price < 0:
        raise ValidationError("Price must be zero or greater", {"field": "price", "value": value})
    return price


def _status(value: Any) -> str:
    raw = value.value if isinstance(value, InventoryStatus) else value
    if raw not in STATUS_VALUES:
        raise ValidationError(
            f"Unknown status '{raw}'",
            {"field": "status", "value": raw, "allowed": STATUS_VALUES},
        )
    return raw


def _purchase_date(value: Any) -> Optional[str]:
    text = clean_optional_str(value)
    if text is None:
        return None
    if not _ISO_DATE.match(text):
        raise ValidationError("Purchase date must be YYYY-MM-DD", {"field": "purchase_date", "value": text})
    try:
        date.fromisoformat(text)
    except ValueError:
        raise ValidationError("Purchase date is not a valid date", {"field": "purchase_date", "value": text})
    return text


def clean_item_fields(fields: Dict[str, Any], *, partial: bool) -> Dict[str, Any]:
    """
    Validate and normalise item fields before anything reaches the database.
    With partial=True only the keys present are checked (PATCH semantics).
    """
    unknown = sorted(set(fields) - set(WRITABLE_FIELDS))
    if unknown:
        raise ValidationError("Unknown inventory fields", {"fields": unknown})

    cleaned: Dict[str, Any] = {}
    if not partial or "name" in fields:
        cleaned["name"] = _required_text(fields, "name", "Name")
    if not partial or "category" in fields:
        cleaned["category"] = _required_text(fields, "category", "Category")
    if not partial or "price" in fields:
        cleaned["price"] = _price(fields.get("price", 0))
    if not partial or "status" in fields:
        cleaned["status"] = _status(fields.get("status", InventoryStatus.AVAILABLE.value))
    if "purchase_date" in fields:
        cleaned["purchase_date"] = _purchase_date(fields["purchase_date"])
    for key in _OPTIONAL_TEXT:
        if key in fields:
            cleaned[key] = clean_optional_str(fields[key])
    return cleaned


class InventoryService:
    def __init__(self, repo: Optional[InventoryRepo] = None):
        self.repo = repo or InventoryRepo()

    # ---- Queries ----
    def list(self) -> List[InventoryItem]:
        return [InventoryItem(**row) for row in self.repo.list_items()]

    def get(self, item_id: str) -> InventoryItem:
        row = self.repo.get_item(item_id)
        if not row:
            raise NotFoundError(f"Inventory item {item_id} not found", {"id": item_id})
        return InventoryItem(**row)

    def list_in_category(self, category: str) -> List[InventoryItem]:
        return [InventoryItem(**row) for row in self.repo.list_items_in_category(category)]

    def summary(self) -> InventorySummary:
        """Counts per status and the summed equipment value, for the dashboard cards."""
        items = self.list()
        by_status = {s: 0 for s in STATUS_VALUES}
        for item in items:
            by_status[item.status.value] += 1
        return InventorySummary(
            total_items=len(items),
            total_value=round(sum(item.price for item in items), 2),
            by_status=by_status,
        )

    # ---- Create/Update/Delete ----
    def create(self, fields: Dict[str, Any]) -> InventoryItem:
        cleaned = clean_item_fields(fields, partial=False)
        return InventoryItem(**self.repo.create_item(cleaned))

    def update(self, item_id: str, changes: Dict[str, Any]) -> InventoryItem:
        cleaned = clean_item_fields(changes, partial=True)
        row = self.repo.update_item(item_id, cleaned)
        if not row:
            raise NotFoundError(f"Inventory item {item_id} not found", {"id": item_id})
        return InventoryItem(**row)

    def delete(self, item_id: str) -> None:
        if not self.repo.delete_item(item_id):
            raise NotFoundError(f"Inventory item {item_id} not found", {"id": item_id})
