from __future__ import annotations
from typing import Any, Dict, List, Optional
import logging

import psycopg2
from psycopg2 import errors as pg_errors
from psycopg2.extras import execute_values

from common.deps import inventory_conn
from common.utils import cursor_to_dict, cursor_to_dicts, is_uuid
from core.errors import ConflictError

logger = logging.getLogger(__name__)

CATEGORY_COLUMNS = "id::text AS id, name, order_index, created_at"


class CategoryRepo:
    """SQL access for inventory_categories. The only writer of that table."""

    def init_tables(self) -> None:
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                    CREATE TABLE IF NOT EXISTS inventory_categories (
                        id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
                        name TEXT NOT NULL,
                        order_index INTEGER NOT NULL CHECK (order_index >= 0),
                        created_at TIMESTAMPTZ DEFAULT NOW(),
                        CONSTRAINT inventory_categories_name_key UNIQUE (name),
                        CONSTRAINT inventory_categories_order_index_key UNIQUE (order_index)
                            DEFERRABLE INITIALLY DEFERRED
                    )
                """)

    # -------- Queries --------
    def list_categories(self) -> List[Dict[str, Any]]:
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(f"""
                    SELECT {CATEGORY_COLUMNS}
                    FROM inventory_categories
                    ORDER BY order_index ASC, id ASC
                """)
                return cursor_to_dicts(cur)

    def get_category_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute(f"SELECT {CATEGORY_COLUMNS} FROM inventory_categories WHERE name = %s", (name,))
                return cursor_to_dict(cur)

    # -------- Mutations --------
    def create_category(self, name: str) -> Dict[str, Any]:
        """Insert with the next free order_index; the table lock serialises concurrent creates."""
        try:
            with inventory_conn() as conn:
                with conn.cursor() as cur:
                    cur.execute("LOCK TABLE inventory_categories IN SHARE ROW EXCLUSIVE MODE")
                    cur.execute(f"""
                        INSERT INTO inventory_categories (name, order_index)
                        SELECT %s, COALESCE(MAX(order_index) + 1, 0) FROM inventory_categories
                        RETURNING {CATEGORY_COLUMNS}
                    """, (name,))
                    row = cursor_to_dict(cur)
        except pg_errors.UniqueViolation:
            raise ConflictError(f"Category '{name}' already exists", {"name": name})
        logger.info(f"Category created: {row['name']} (order_index={row['order_index']})")
        return row

    def rename_category(self, category_id: str, name: str) -> Optional[Dict[str, Any]]:
        """
        Rename only; items keep the name they were saved with and show as
        uncategorized until edited. Returns None if the category does not exist.
        """
        if not is_uuid(category_id):
            return None
        try:
            with inventory_conn() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT name FROM inventory_categories WHERE id = %s FOR UPDATE", (category_id,))
                    current = cur.fetchone()
                    if not current:
                        return None
                    old_name = current[0]

                    cur.execute(f"""
                        UPDATE inventory_categories SET name = %s
                        WHERE id = %s
                        RETURNING {CATEGORY_COLUMNS}
                    """, (name, category_id))
                    row = cursor_to_dict(cur)
        except pg_errors.UniqueViolation:
            raise ConflictError(f"Category '{name}' already exists", {"name": name})

        logger.info(f"Category {category_id} renamed '{old_name}' -> '{name}'")
        return row

    def delete_category(self, category_id: str) -> Dict[str, Any]:
        """
        Delete unless an item still carries the category's name.
        Item writes are blocked while the check and the delete run.
        """
        if not is_uuid(category_id):
            return {"found": False, "name": None, "blocking_items": []}
        with inventory_conn() as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT name FROM inventory_categories WHERE id = %s FOR UPDATE", (category_id,))
                current = cur.fetchone()
                if not current:
                    return {"found": False, "name": None, "blocking_items": []}
                name = current[0]

                cur.execute("LOCK TABLE inventory IN SHARE MODE")
                cur.execute("""
                    SELECT id::text AS id, name
                    FROM inventory
                    WHERE category = %s
                    ORDER BY name
                """, (name,))
                blocking = cursor_to_dicts(cur)
                if blocking:
                    return {"found": True, "name": name, "blocking_items": blocking}

                cur.execute("DELETE FROM inventory_categories WHERE id = %s", (category_id,))

        logger.info(f"Category deleted: {name} ({category_id})")
        return {"found": True, "name": name, "blocking_items": []}

    def reorder_categories(self, ordered_ids: List[str]) -> List[Dict[str, Any]]:
        """
        Renumber every category to its position in ordered_ids as one transaction.
        Raises ConflictError if the stored set no longer matches ordered_ids.
        """
        try:
            with inventory_conn() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT id::text FROM inventory_categories FOR UPDATE")
                    stored = {r[0] for r in cur.fetchall()}
                    if stored != set(ordered_ids):
                        raise ConflictError(
                            "Categories changed while reordering; reload and try again",
                            {
                                "missing": sorted(stored - set(ordered_ids)),
                                "unknown": sorted(set(ordered_ids) - stored),
                            },
                        )

                    if ordered_ids:
                        execute_values(
                            cur,
                            """
                            UPDATE inventory_categories AS c
                               SET order_index = v.order_index
                              FROM (VALUES %s) AS v(id, order_index)
                             WHERE c.id = v.id::uuid
                            """,
                            [(cid, idx) for idx, cid in enumerate(ordered_ids)],
                            page_size=max(len(ordered_ids), 1),
                        )

                    cur.execute(f"""
                        SELECT {CATEGORY_COLUMNS}
                        FROM inventory_categories
                        ORDER BY order_index ASC, id ASC
                    """)
                    rows = cursor_to_dicts(cur)
        except psycopg2.Error as e:
            logger.error(f"Database error in reorder_categories: {e}")
            raise

        logger.info(f"Categories reordered ({len(ordered_ids)} rows)")
        return rows
