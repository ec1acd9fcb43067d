from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends

from common.deps import get_current_user
from common.dto import DeleteResult
from .schemas import InventoryItem, InventoryItemCreateIn, InventoryItemUpdateIn, InventorySummary
from .service import InventoryService

router = APIRouter()


def _svc() -> InventoryService:
    return InventoryService()


@router.get("/items", response_model=List[InventoryItem])
def list_items(svc: InventoryService = Depends(_svc), user=Depends(get_current_user)):
    return svc.list()


@router.get("/items/summary", response_model=InventorySummary)
def inventory_summary(svc: InventoryService = Depends(_svc), user=Depends(get_current_user)):
    return svc.summary()


@router.post("/items", response_model=InventoryItem, status_code=201)
def create_item(body: InventoryItemCreateIn, svc: InventoryService = Depends(_svc), user=Depends(get_current_user)):
    return svc.create(body.model_dump())


@router.get("/items/{item_id}", response_model=InventoryItem)
def get_item(item_id: str, svc: InventoryService = Depends(_svc), user=Depends(get_current_user)):
    return svc.get(item_id)


@router.patch("/items/{item_id}", response_model=InventoryItem)
def update_item(
    item_id: str,
    body: InventoryItemUpdateIn,
    svc: InventoryService = Depends(_svc),
    user=Depends(get_current_user),
):
    return svc.update(item_id, body.model_dump(exclude_unset=True))


@router.delete("/items/{item_id}", response_model=DeleteResult)
def delete_item(item_id: str, svc: InventoryService = Depends(_svc), user=Depends(get_current_user)):
    svc.delete(item_id)
    return DeleteResult(status="success", deleted=1, id=item_id)
