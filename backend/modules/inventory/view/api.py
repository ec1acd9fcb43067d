from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends

from common.deps import get_app_settings, get_current_user
from core.config import Settings
from core.errors import ValidationError
from modules.inventory.categories import api as categories_api
from modules.inventory.categories.service import CategoryService
from modules.inventory.items import api as items_api
from modules.inventory.items.service import InventoryService
from .engine import category_filter_options, project
from .schemas import GroupedView, SortKey, ViewParams

router = APIRouter()


def _default_sort(settings: Settings) -> SortKey:
    try:
        return SortKey(settings.DEFAULT_SORT_KEY)
    except ValueError:
        raise ValidationError(f"Unknown sort key '{settings.DEFAULT_SORT_KEY}'", {"allowed": [s.value for s in SortKey]})


@router.get("/view", response_model=GroupedView)
def inventory_view(
    search: str = "",
    category: Optional[str] = None,
    sort: Optional[SortKey] = None,
    settings: Settings = Depends(get_app_settings),
    categories: CategoryService = Depends(categories_api._svc),
    items: InventoryService = Depends(items_api._svc),
    user=Depends(get_current_user),
):
    """Grouped equipment list: category order first, orphans last under the uncategorized label."""
    params = ViewParams(
        search_term=search,
        category_filter=category or settings.ALL_CATEGORIES,
        sort_key=sort or _default_sort(settings),
    )
    return project(
        categories.list(),
        items.list(),
        params,
        uncategorized_label=settings.UNCATEGORIZED_LABEL,
        all_categories=settings.ALL_CATEGORIES,
    )


@router.get("/view/filters", response_model=List[str])
def inventory_view_filters(
    settings: Settings = Depends(get_app_settings),
    categories: CategoryService = Depends(categories_api._svc),
    items: InventoryService = Depends(items_api._svc),
    user=Depends(get_current_user),
):
    return category_filter_options(categories.list(), items.list(), settings.ALL_CATEGORIES)
