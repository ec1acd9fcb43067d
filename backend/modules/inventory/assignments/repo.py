from __future__ import annotations
from typing import Any, Dict, List, Optional, Set
import logging

from psycopg2 import errors as pg_errors

from common.deps import inventory_conn
from common.utils import cursor_to_dict, cursor_to_dicts, is_uuid
from core.errors import DuplicateAssignmentError

logger = logging.getLogger(__name__)

ASSIGNMENT_COLUMNS = """
    pi.id::text AS id, pi.project_id, pi.inventory_item_id::text AS inventory_item_id,
    pi.quantity, pi.notes, pi.created_at
"""

JOINED_ITEM_COLUMNS = """
    i.id::text AS item_id, i.name AS item_name, i.category AS item_category,
    i.brand AS item_brand, i.model AS item_model, i.serial_number AS item_serial_number,
    i.purchase_date::text AS item_purchase_date, i.price::float8 AS item_price,
    i.status AS item_status, i.notes AS item_notes, i.created_at AS item_created_at
"""


def _nest_item(row: Dict[str, Any]) -> Dict[str, Any]:
    """Fold the item_* columns of a joined row into an `inventory_item` dict."""
    item = {k[len("item_"):]: row.pop(k) for k in list(row) if k.startswith("item_")}
    row["inventory_item"] = item if item.get("id") else None
    return row


class AssignmentRepo:
    """SQL access for project_inventory_items. The only writer of that table."""

    def init_tables(self) -> None:
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS project_inventory_items (
                        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                        project_id TEXT NOT NULL,
                        inventory_item_id UUID NOT NULL REFERENCES inventory (id) ON DELETE CASCADE,
                        quantity INTEGER NOT NULL DEFAULT 1 CHECK (quantity >= 1),
                        notes TEXT,
                        created_at TIMESTAMPTZ DEFAULT NOW(),
                        CONSTRAINT project_inventory_items_project_item_key
                            UNIQUE (project_id, inventory_item_id)
                    )
                """)
                cur.execute("""
                    ALTER TABLE project_inventory_items
                    ADD COLUMN IF NOT EXISTS quantity INTEGER NOT NULL DEFAULT 1 CHECK (quantity >= 1)
                """)
                cur.execute("""
                    CREATE INDEX IF NOT EXISTS idx_project_inventory_items_item
                    ON project_inventory_items (inventory_item_id)
                """)

    # -------- Queries --------
    def list_for_project(self, project_id: str) -> List[Dict[str, Any]]:
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(f"""
                    SELECT {ASSIGNMENT_COLUMNS}, {JOINED_ITEM_COLUMNS}
                    FROM project_inventory_items pi
                    LEFT JOIN inventory i ON i.id = pi.inventory_item_id
                    WHERE pi.project_id = %s
                    ORDER BY pi.created_at ASC, pi.id ASC
                """, (project_id,))
                return [_nest_item(row) for row in cursor_to_dicts(cur)]

    def find_assignment(self, project_id: str, inventory_item_id: str) -> Optional[Dict[str, Any]]:
        if not is_uuid(inventory_item_id):
            return None
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(f"""
                    SELECT {ASSIGNMENT_COLUMNS}
                    FROM project_inventory_items pi
                    WHERE pi.project_id = %s AND pi.inventory_item_id = %s
                """, (project_id, inventory_item_id))
                return cursor_to_dict(cur)

    def linked_item_ids(self, project_id: str) -> Set[str]:
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT inventory_item_id::text
                    FROM project_inventory_items
                    WHERE project_id = %s
                """, (project_id,))
                return {r[0] for r in cur.fetchall()}

    # -------- Mutations --------
    def create_assignment(
        self, project_id: str, inventory_item_id: str, notes: Optional[str], quantity: int = 1
    ) -> Dict[str, Any]:
        """
        Re-read the item's status under a share lock and insert only if it is
        still available. Returns {"found", "status", "assignment"}; assignment
        is None when the item is missing or no longer available.
        """
        if not is_uuid(inventory_item_id):
            return {"found": False, "status": None, "assignment": None}
        try:
            with inventory_conn() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT status FROM inventory WHERE id = %s FOR SHARE", (inventory_item_id,))
                    current = cur.fetchone()
                    if not current:
                        return {"found": False, "status": None, "assignment": None}
                    if current[0] != "available":
                        return {"found": True, "status": current[0], "assignment": None}

                    cur.execute(f"""
                        INSERT INTO project_inventory_items AS pi (project_id, inventory_item_id, quantity, notes)
                        VALUES (%s, %s, %s, %s)
                        RETURNING {ASSIGNMENT_COLUMNS}
                    """, (project_id, inventory_item_id, quantity, notes))
                    row = cursor_to_dict(cur)
        except pg_errors.UniqueViolation:
            raise DuplicateAssignmentError(
                "Item is already assigned to this project",
                {"project_id": project_id, "inventory_item_id": inventory_item_id},
            )

        logger.info(f"Item {inventory_item_id} assigned to project {project_id} ({row['id']})")
        return {"found": True, "status": "available", "assignment": row}

    def delete_assignment(self, assignment_id: str) -> bool:
        if not is_uuid(assignment_id):
            return False
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM project_inventory_items WHERE id = %s", (assignment_id,))
                deleted = cur.rowcount > 0
        if deleted:
            logger.info(f"Project assignment removed: {assignment_id}")
        return deleted
