"""
Inventory view engine.

Pure functions only: given the category order, the items and the view
parameters, build the filtered, sorted and grouped model the dashboard
renders. Nothing here touches the database, so callers re-run project()
after every mutation instead of relying on cached groupings.
"""
from __future__ import annotations
from typing import Callable, Dict, List, Sequence, Tuple
import unicodedata

from modules.inventory.categories.schemas import Category
from modules.inventory.items.schemas import InventoryItem
from .schemas import GroupedView, InventoryGroup, SortKey, ViewParams

UNCATEGORIZED_KEY = "uncategorized"


def collation_key(value: str) -> Tuple[str, str]:
    """
    Accent- and case-insensitive ordering ("Çanta" sorts with "canta"),
    falling back to the raw string so only identical names tie.
    """
    decomposed = unicodedata.normalize("NFKD", value or "")
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), value or ""


def matches_search(item: InventoryItem, search_term: str) -> bool:
    if not search_term:
        return True
    needle = search_term.lower()
    return any(needle in (field or "").lower() for field in (item.name, item.brand, item.category))


def passes_filter(item: InventoryItem, params: ViewParams, all_categories: str = "All") -> bool:
    if params.category_filter != all_categories and item.category != params.category_filter:
        return False
    return matches_search(item, params.search_term)


# Dates compare as ISO strings; a missing date is the lowest value.
_SORTS: Dict[SortKey, Tuple[Callable[[InventoryItem], object], bool]] = {
    SortKey.NAME: (lambda i: collation_key(i.name), False),
    SortKey.PRICE_ASC: (lambda i: i.price, False),
    SortKey.PRICE_DESC: (lambda i: i.price, True),
    SortKey.DATE_ASC: (lambda i: i.purchase_date or "", False),
    SortKey.DATE_DESC: (lambda i: i.purchase_date or "", True),
}


def sort_items(items: Sequence[InventoryItem], sort_key: SortKey) -> List[InventoryItem]:
    """Stable: equal keys keep their input order, in both directions."""
    key, reverse = _SORTS[SortKey(sort_key)]
    return sorted(items, key=key, reverse=reverse)


def ordered_categories(categories: Sequence[Category]) -> List[Category]:
    return sorted(categories, key=lambda c: (c.order_index, c.id))


def project(
    categories: Sequence[Category],
    items: Sequence[InventoryItem],
    params: ViewParams,
    *,
    uncategorized_label: str = "Uncategorized",
    all_categories: str = "All",
) -> GroupedView:
    visible = sort_items([i for i in items if passes_filter(i, params, all_categories)], params.sort_key)

    groups: Dict[str, InventoryGroup] = {}
    for category in ordered_categories(categories):
        if category.name not in groups:
            groups[category.name] = InventoryGroup(
                key=f"category:{category.id}", label=category.name, category_id=category.id, items=[]
            )

    orphans: List[InventoryItem] = []
    for item in visible:
        group = groups.get(item.category)
        if group is None:
            orphans.append(item)
        else:
            group.items.append(item)

    result = [g for g in groups.values() if g.items]
    if orphans:
        result.append(InventoryGroup(key=UNCATEGORIZED_KEY, label=uncategorized_label, uncategorized=True, items=orphans))
    return GroupedView(groups=result, total_items=len(visible))


def category_filter_options(
    categories: Sequence[Category],
    items: Sequence[InventoryItem],
    all_categories: str = "All",
) -> List[str]:
    """The sentinel, known categories in display order, then names only items carry."""
    options = [all_categories]
    seen = {all_categories}
    for name in [c.name for c in ordered_categories(categories)] + [i.category for i in items]:
        if name not in seen:
            seen.add(name)
            options.append(name)
    return options
