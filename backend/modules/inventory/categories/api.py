from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from common.deps import get_current_user
from common.dto import DeleteResult
from core.errors import ValidationError
from .schemas import Category, CategoryCreateIn, CategoryRenameIn, CategoryReorderIn, ReorderOutcome
from .service import CategoryService

router = APIRouter()


def _svc() -> CategoryService:
    return CategoryService()


@router.get("/categories", response_model=List[Category])
def list_categories(svc: CategoryService = Depends(_svc), user=Depends(get_current_user)):
    return svc.list()


@router.post("/categories", response_model=Category, status_code=201)
def create_category(body: CategoryCreateIn, svc: CategoryService = Depends(_svc), user=Depends(get_current_user)):
    return svc.create(body.name)


# Static path before /categories/{category_id}
@router.put("/categories/order", response_model=ReorderOutcome)
def reorder_categories(body: CategoryReorderIn, svc: CategoryService = Depends(_svc), user=Depends(get_current_user)):
    """
    Two-phase reorder. 200 with the confirmed order, otherwise the error's
    status with the order the client should roll back to.
    """
    outcome = svc.try_reorder(body.ordered_ids)
    if outcome.ok:
        return outcome
    status_code = ValidationError.status_code if outcome.error == "ValidationError" else 409
    return JSONResponse(status_code=status_code, content=outcome.model_dump(mode="json"))


@router.patch("/categories/{category_id}", response_model=Category)
def rename_category(
    category_id: str,
    body: CategoryRenameIn,
    svc: CategoryService = Depends(_svc),
    user=Depends(get_current_user),
):
    return svc.rename(category_id, body.name)


@router.delete("/categories/{category_id}", response_model=DeleteResult)
def delete_category(category_id: str, svc: CategoryService = Depends(_svc), user=Depends(get_current_user)):
    svc.delete(category_id)
    return DeleteResult(status="success", deleted=1, id=category_id)
