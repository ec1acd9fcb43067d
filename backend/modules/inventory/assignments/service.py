from __future__ import annotations
from typing import Dict, List, Optional
import logging

from common.utils import clean_optional_str
from core.errors import DuplicateAssignmentError, NotAvailableError, NotFoundError, ValidationError
from modules.inventory.items.schemas import InventoryItem, InventoryStatus
from modules.inventory.items.service import InventoryService
from .repo import AssignmentRepo
from .schemas import ProjectAssignment, ProjectAssignmentDetail

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ["Category", "Equipment", "Brand", "Model", "Serial No", "Notes"]


def _project_id(project_id: Optional[str]) -> str:
    cleaned = (project_id or "").strip()
    if not cleaned:
        raise ValidationError("Project id is required")
    return cleaned


def _quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("Quantity must be a whole number of at least 1", {"field": "quantity", "value": quantity})
    return quantity


class AssignmentService:
    """
    Links inventory items to projects. Reads items, never changes them:
    assigning does not move an item out of `available`.
    """

    def __init__(self, repo: Optional[AssignmentRepo] = None, items: Optional[InventoryService] = None):
        self.repo = repo or AssignmentRepo()
        self.items = items or InventoryService()

    # ---- Queries ----
    def list_for_project(self, project_id: str) -> List[ProjectAssignmentDetail]:
        project_id = _project_id(project_id)
        return [ProjectAssignmentDetail(**row) for row in self.repo.list_for_project(project_id)]

    def available_candidates(self, category: Optional[str], project_id: str) -> List[InventoryItem]:
        """Available items of `category` not yet linked to the project."""
        project_id = _project_id(project_id)
        if not category:
            return []
        linked = self.repo.linked_item_ids(project_id)
        return [
            item for item in self.items.list_in_category(category)
            if item.status == InventoryStatus.AVAILABLE and item.id not in linked
        ]

    def export_rows(self, project_id: str) -> List[Dict[str, str]]:
        rows = []
        for assignment in self.list_for_project(project_id):
            item = assignment.inventory_item
            rows.append({
                "Category": (item.category if item else None) or "-",
                "Equipment": (item.name if item else None) or "-",
                "Brand": (item.brand if item else None) or "-",
                "Model": (item.model if item else None) or "-",
                "Serial No": (item.serial_number if item else None) or "-",
                "Notes": assignment.notes or "-",
            })
        return rows

    # ---- Mutations ----
    def assign(
        self, project_id: str, inventory_item_id: str, notes: Optional[str] = None, quantity: int = 1
    ) -> ProjectAssignment:
        project_id = _project_id(project_id)
        quantity = _quantity(quantity)
        item = self.items.get(inventory_item_id)
        if item.status != InventoryStatus.AVAILABLE:
            raise NotAvailableError(
                f"'{item.name}' is {item.status.value} and cannot be assigned",
                {"inventory_item_id": item.id, "status": item.status.value},
            )
        if self.repo.find_assignment(project_id, item.id):
            raise DuplicateAssignmentError(
                "Item is already assigned to this project",
                {"project_id": project_id, "inventory_item_id": item.id},
            )

        # Status is checked again at write time; another session may have changed it
        result = self.repo.create_assignment(project_id, item.id, clean_optional_str(notes), quantity)
        if not result["found"]:
            raise NotFoundError(f"Inventory item {item.id} not found", {"id": item.id})
        if result["assignment"] is None:
            raise NotAvailableError(
                f"'{item.name}' is {result['status']} and cannot be assigned",
                {"inventory_item_id": item.id, "status": result["status"]},
            )
        return ProjectAssignment(**result["assignment"])

    def unassign(self, assignment_id: str) -> None:
        if not self.repo.delete_assignment(assignment_id):
            raise NotFoundError(f"Assignment {assignment_id} not found", {"id": assignment_id})
