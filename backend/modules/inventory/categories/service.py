from __future__ import annotations
from typing import Iterable, List, Optional, Sequence, Tuple
import logging

from core.errors import AppError, ConflictError, NotFoundError, ReferentialConflictError, ValidationError
from .repo import CategoryRepo
from .schemas import Category, ReorderOutcome

logger = logging.getLogger(__name__)


def validate_category_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Category name is required")
    return cleaned


def normalize_order(categories: Iterable[Category]) -> Tuple[List[Category], bool]:
    """
    Sort by (order_index, id) and renumber 0..n-1.
    The flag tells whether any stored index had to change (duplicates or gaps).
    """
    ordered = sorted(categories, key=lambda c: (c.order_index, c.id))
    normalized = []
    changed = False
    for idx, category in enumerate(ordered):
        if category.order_index != idx:
            changed = True
            category = category.model_copy(update={"order_index": idx})
        normalized.append(category)
    return normalized, changed


def validate_permutation(categories: Sequence[Category], ordered_ids: Sequence[str]) -> List[str]:
    ids = [str(i) for i in ordered_ids]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise ValidationError("Category order contains duplicate ids", {"duplicates": duplicates})

    known = {c.id for c in categories}
    missing = sorted(known - set(ids))
    unknown = sorted(set(ids) - known)
    if missing or unknown:
        raise ValidationError(
            "Category order must list every category exactly once",
            {"missing": missing, "unknown": unknown},
        )
    return ids


def preview_reorder(categories: Sequence[Category], ordered_ids: Sequence[str]) -> List[Category]:
    """Local phase of a reorder: the categories as they will look once it commits."""
    ids = validate_permutation(categories, ordered_ids)
    by_id = {c.id: c for c in categories}
    return [by_id[cid].model_copy(update={"order_index": idx}) for idx, cid in enumerate(ids)]


class CategoryService:
    def __init__(self, repo: Optional[CategoryRepo] = None):
        self.repo = repo or CategoryRepo()

    # ---- Queries ----
    def list(self) -> List[Category]:
        """Categories in display order; repairs a broken index sequence on the way."""
        stored = [Category(**row) for row in self.repo.list_categories()]
        normalized, changed = normalize_order(stored)
        if changed:
            logger.warning(f"Category order_index sequence was not 0..{len(stored) - 1}; renumbering")
            try:
                return [Category(**row) for row in self.repo.reorder_categories([c.id for c in normalized])]
            except ConflictError as e:
                # Another session changed the set; the next read heals again
                logger.warning(f"Category order repair skipped: {e.message}")
        return normalized

    # ---- Mutations ----
    def create(self, name: str) -> Category:
        name = validate_category_name(name)
        if self.repo.get_category_by_name(name):
            raise ConflictError(f"Category '{name}' already exists", {"name": name})
        return Category(**self.repo.create_category(name))

    def rename(self, category_id: str, name: str) -> Category:
        name = validate_category_name(name)
        existing = self.repo.get_category_by_name(name)
        if existing and existing["id"] != category_id:
            raise ConflictError(f"Category '{name}' already exists", {"name": name})

        row = self.repo.rename_category(category_id, name)
        if not row:
            raise NotFoundError(f"Category {category_id} not found", {"id": category_id})
        return Category(**row)

    def delete(self, category_id: str) -> None:
        result = self.repo.delete_category(category_id)
        if not result["found"]:
            raise NotFoundError(f"Category {category_id} not found", {"id": category_id})
        blocking = result["blocking_items"]
        if blocking:
            raise ReferentialConflictError(
                f"Category '{result['name']}' is used by {len(blocking)} item(s)",
                {"category": result["name"], "blocking_items": blocking},
            )

    def reorder(self, ordered_ids: Sequence[str]) -> List[Category]:
        """Apply a full new order atomically; every index becomes its 0-based position."""
        current = [Category(**row) for row in self.repo.list_categories()]
        ids = validate_permutation(current, ordered_ids)
        return [Category(**row) for row in self.repo.reorder_categories(ids)]

    def try_reorder(self, ordered_ids: Sequence[str]) -> ReorderOutcome:
        """
        Two-phase reorder: snapshot, compute the local result, submit, and
        report either the confirmed state or the snapshot to roll back to.
        """
        snapshot = self.list()
        try:
            preview_reorder(snapshot, ordered_ids)
            confirmed = self.reorder(ordered_ids)
        except AppError as e:
            logger.info(f"Reorder rejected ({e.code}): {e.message}")
            return ReorderOutcome(ok=False, categories=snapshot, reason=e.message, error=e.code)
        return ReorderOutcome(ok=True, categories=confirmed)
