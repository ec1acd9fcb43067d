from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

from common.deps import inventory_conn
from common.utils import cursor_to_dict, cursor_to_dicts, is_uuid

logger = logging.getLogger(__name__)

ITEM_COLUMNS = """
    id::text AS id, name, category, brand, model, serial_number,
    purchase_date::text AS purchase_date, price::float8 AS price,
    status, notes, created_at
"""

WRITABLE_FIELDS = ("name", "category", "brand", "model", "serial_number",
                   "purchase_date", "price", "status", "notes")


class InventoryRepo:
    """SQL access for the inventory table."""

    def init_tables(self) -> None:
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS inventory (
                        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                        name TEXT NOT NULL,
                        category TEXT NOT NULL,
                        brand TEXT,
                        model TEXT,
                        serial_number TEXT,
                        purchase_date DATE,
                        price NUMERIC(12, 2) NOT NULL DEFAULT 0 CHECK (price >= 0),
                        status VARCHAR(20) NOT NULL DEFAULT 'available'
                            CHECK (status IN ('available', 'rented', 'maintenance', 'lost')),
                        notes TEXT,
                        created_at TIMESTAMPTZ DEFAULT NOW()
                    )
                """)
                cur.execute("""
                    CREATE INDEX IF NOT EXISTS idx_inventory_category
                    ON inventory (category)
                """)

    # -------- Queries --------
    def list_items(self) -> List[Dict[str, Any]]:
        """Newest first, the order the dashboard lists equipment in."""
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(f"""
                    SELECT {ITEM_COLUMNS}
                    FROM inventory
                    ORDER BY created_at DESC, id ASC
                """)
                return cursor_to_dicts(cur)

    def get_item(self, item_id: str) -> Optional[Dict[str, Any]]:
        if not is_uuid(item_id):
            return None
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {ITEM_COLUMNS} FROM inventory WHERE id = %s", (item_id,))
                return cursor_to_dict(cur)

    def list_items_in_category(self, category: str) -> List[Dict[str, Any]]:
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(f"""
                    SELECT {ITEM_COLUMNS}
                    FROM inventory
                    WHERE category = %s
                    ORDER BY created_at DESC, id ASC
                """, (category,))
                return cursor_to_dicts(cur)

    # -------- Mutations --------
    def create_item(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        columns = [k for k in WRITABLE_FIELDS if k in fields]
        placeholders = ", ".join(["%s"] * len(columns))
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    INSERT INTO inventory ({', '.join(columns)})
                    VALUES ({placeholders})
                    RETURNING {ITEM_COLUMNS}
                    """,
                    [fields[k] for k in columns],
                )
                row = cursor_to_dict(cur)
        logger.info(f"Inventory item created: {row['name']} ({row['id']})")
        return row

    def update_item(self, item_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Patch-like update – only sets provided fields.
        Returns None if the item does not exist.
        """
        if not is_uuid(item_id):
            return None
        pairs = []
        vals = []
        for k in WRITABLE_FIELDS:
            if k in fields:
                pairs.append(f"{k} = %s")
                vals.append(fields[k])
        if not pairs:
            # nothing to update – return current row
            return self.get_item(item_id)

        vals.append(item_id)
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    f"""
                    UPDATE inventory
                       SET {', '.join(pairs)}
                     WHERE id = %s
                 RETURNING {ITEM_COLUMNS}
                    """,
                    vals,
                )
                row = cursor_to_dict(cur)
        if row:
            logger.info(f"Inventory item updated: {item_id} ({', '.join(k for k in WRITABLE_FIELDS if k in fields)})")
        return row

    def delete_item(self, item_id: str) -> bool:
        """Unconditional; project links go with the item (ON DELETE CASCADE)."""
        if not is_uuid(item_id):
            return False
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM inventory WHERE id = %s", (item_id,))
                deleted = cur.rowcount > 0
        if deleted:
            logger.info(f"Inventory item deleted: {item_id}")
        return deleted
