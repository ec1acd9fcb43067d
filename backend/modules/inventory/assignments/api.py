from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends

from common.deps import get_current_user
from common.dto import DeleteResult
from modules.inventory.items.schemas import InventoryItem
from .export import stream_csv_equipment
from .schemas import AssignmentCreateIn, ProjectAssignment, ProjectAssignmentDetail
from .service import AssignmentService

router = APIRouter()


def _svc() -> AssignmentService:
    return AssignmentService()


@router.get("/projects/{project_id}/assignments", response_model=List[ProjectAssignmentDetail])
def list_project_assignments(project_id: str, svc: AssignmentService = Depends(_svc), user=Depends(get_current_user)):
    return svc.list_for_project(project_id)


@router.post("/projects/{project_id}/assignments", response_model=ProjectAssignment, status_code=201)
def assign_item(
    project_id: str,
    body: AssignmentCreateIn,
    svc: AssignmentService = Depends(_svc),
    user=Depends(get_current_user),
):
    return svc.assign(project_id, body.inventory_item_id, body.notes, body.quantity)


@router.get("/projects/{project_id}/assignments/export")
def export_project_assignments(
    project_id: str,
    title: Optional[str] = None,
    svc: AssignmentService = Depends(_svc),
    user=Depends(get_current_user),
):
    """CSV of the project's equipment, named after the project title when given."""
    return stream_csv_equipment(svc.export_rows(project_id), title or project_id)


@router.get("/projects/{project_id}/candidates", response_model=List[InventoryItem])
def assignment_candidates(
    project_id: str,
    category: Optional[str] = None,
    svc: AssignmentService = Depends(_svc),
    user=Depends(get_current_user),
):
    return svc.available_candidates(category, project_id)


@router.delete("/assignments/{assignment_id}", response_model=DeleteResult)
def unassign_item(assignment_id: str, svc: AssignmentService = Depends(_svc), user=Depends(get_current_user)):
    svc.unassign(assignment_id)
    return DeleteResult(status="success", deleted=1, id=assignment_id)
