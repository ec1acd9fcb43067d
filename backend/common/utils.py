from __future__ import annotations
from typing import Any, Dict, List, Optional
import uuid


def cursor_to_dicts(cur) -> List[Dict[str, Any]]:
    """Map every remaining row of a psycopg2 cursor to a dict keyed by column name."""
    columns = [c[0] for c in cur.description]
    return [dict(zip(columns, row)) for row in cur.fetchall()]


def cursor_to_dict(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    if row is None:
        return None
    columns = [c[0] for c in cur.description]
    return dict(zip(columns, row))


def clean_optional_str(value: Optional[str]) -> Optional[str]:
    """Trim a free-text field; blank strings are stored as NULL."""
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def is_uuid(value: Any) -> bool:
    """Ids are UUID columns; anything else can never match a row."""
    try:
        uuid.UUID(str(value))
    except (TypeError, ValueError):
        return False
    return True
