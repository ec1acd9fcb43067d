# Inventory module
"""
Inventory categorization & assignment for the studio dashboard

This module handles:
- Categories: ordered, reorderable equipment categories
- Items: equipment records with lifecycle status
- View: filtered/sorted/grouped equipment list derived from the two above
- Assignments: links between equipment and projects

Sub-modules:
- categories: CRUD + atomic reorder
- items: CRUD + summary
- view: pure grouping engine and its read endpoints
- assignments: assign/unassign, candidates, CSV export
"""

from .categories.api import router as categories_router
from .items.api import router as items_router
from .view.api import router as view_router
from .assignments.api import router as assignments_router

__all__ = ["categories_router", "items_router", "view_router", "assignments_router"]
