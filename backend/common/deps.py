# common/deps.py
from contextlib import contextmanager

from fastapi import Header

from core.config import Settings, get_settings
from core.db import get_inventory_connection, return_inventory_connection
from core.security import get_current_user as _get_current_user


# ---------------------------
# Auth
# ---------------------------
async def get_current_user(authorization: str = Header(...)):
    """Auth dependency used by protected routes."""
    return await _get_current_user(authorization=authorization)


# ---------------------------
# Settings
# ---------------------------
def get_app_settings() -> Settings:
    """Settings are handed to services explicitly; routers get them here."""
    return get_settings()


# ---------------------------
# Database connections
# ---------------------------
@contextmanager
def inventory_conn():
    """
    Context manager for the inventory DB (categories, items, project links).
    Automatically commits on successful exit, rolls back on exception.
    Usage:
        with inventory_conn() as conn:
            with conn.cursor() as cur: ...
    """
    conn = get_inventory_connection()
    try:
        yield conn
        conn.commit()  # Auto-commit on success (including read operations)
    except Exception:
        conn.rollback()  # Auto-rollback on error
        raise
    finally:
        return_inventory_connection(conn)
