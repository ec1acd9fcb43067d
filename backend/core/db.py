from typing import Optional

from psycopg2 import pool

from core.config import Settings, get_settings

_inventory_pool: Optional[pool.SimpleConnectionPool] = None


def _conn_common_kwargs(settings: Settings):
    """Common connection kwargs with sane defaults for cloud envs."""
    return {"connect_timeout": settings.DB_CONNECT_TIMEOUT, "sslmode": settings.DB_SSLMODE}


def _get_inventory_pool(settings: Optional[Settings] = None):
    """Get or create inventory database connection pool"""
    global _inventory_pool
    if _inventory_pool is None:
        settings = settings or get_settings()
        if not all([settings.INVENTORY_DB_HOST, settings.INVENTORY_DB_PASSWORD]):
            raise ValueError("Missing required database environment variables: INVENTORY_DB_HOST and INVENTORY_DB_PASSWORD")

        _inventory_pool = pool.SimpleConnectionPool(
            minconn=settings.DB_POOL_MIN,
            maxconn=settings.DB_POOL_MAX,
            host=settings.INVENTORY_DB_HOST,
            port=settings.INVENTORY_DB_PORT,
            database=settings.INVENTORY_DB_NAME,
            user=settings.INVENTORY_DB_USER,
            password=settings.INVENTORY_DB_PASSWORD,
            **_conn_common_kwargs(settings),
        )
        print(f"✅ Inventory database connection pool created ({settings.DB_POOL_MIN}-{settings.DB_POOL_MAX} connections)")

    return _inventory_pool


def get_inventory_connection():
    """Get a raw psycopg2 connection for the inventory tables"""
    pool_obj = _get_inventory_pool()
    return pool_obj.getconn()


def return_inventory_connection(conn):
    """Return a connection to the inventory pool"""
    if _inventory_pool and conn:
        _inventory_pool.putconn(conn)


def close_inventory_pool():
    global _inventory_pool
    if _inventory_pool is not None:
        _inventory_pool.closeall()
        _inventory_pool = None


def initialize_database(settings: Optional[Settings] = None) -> bool:
    """Test database connection and create the inventory tables"""
    print("🔧 Testing database connection...")

    try:
        conn = _get_inventory_pool(settings).getconn()
        return_inventory_connection(conn)
        print("✅ Database connection successful")

        # Order matters: project_inventory_items references inventory
        from modules.inventory.categories.repo import CategoryRepo
        from modules.inventory.items.repo import InventoryRepo
        from modules.inventory.assignments.repo import AssignmentRepo

        CategoryRepo().init_tables()
        InventoryRepo().init_tables()
        AssignmentRepo().init_tables()
        print("✅ Inventory tables initialized (inventory_categories, inventory, project_inventory_items)")
        return True
    except Exception as e:
        print(f"❌ Database initialization failed: {e}")
        print("⚠️  Check database configuration and environment variables")
        return False
