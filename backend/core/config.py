import json
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()

DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


class Settings(BaseSettings):
    # CORS: JSON array or comma-separated list, see cors_origins()
    ALLOW_ORIGINS: Optional[str] = None

    # Auth/JWT (tokens are issued by the external auth service)
    AUTH_SECRET_KEY: str = "change-me"       # set via ENV in production
    AUTH_ALGORITHM: str = "HS256"

    LOG_LEVEL: str = "INFO"

    # DB: inventory (psycopg2)
    INVENTORY_DB_HOST: Optional[str] = None
    INVENTORY_DB_PORT: int = 5432
    INVENTORY_DB_NAME: str = "postgres"
    INVENTORY_DB_USER: str = "postgres"
    INVENTORY_DB_PASSWORD: Optional[str] = None
    DB_CONNECT_TIMEOUT: int = 5
    DB_SSLMODE: str = "prefer"
    DB_POOL_MIN: int = 1
    DB_POOL_MAX: int = 10
    INIT_DB_ON_STARTUP: bool = True

    # Inventory view
    UNCATEGORIZED_LABEL: str = "Uncategorized"
    ALL_CATEGORIES: str = "All"
    DEFAULT_SORT_KEY: str = "name"

    class Config:
        case_sensitive = False
        extra = "ignore"

    def cors_origins(self) -> List[str]:
        """Configured origins without trailing slashes or "null"-style placeholders."""
        raw = (self.ALLOW_ORIGINS or "").strip()
        if not raw:
            return []
        entries = None
        if raw.startswith("["):
            try:
                entries = json.loads(raw)
            except json.JSONDecodeError:
                entries = None
        if not isinstance(entries, list):
            entries = raw.strip("[]").split(",")
        origins = []
        for entry in entries:
            origin = str(entry).strip().strip('"').rstrip("/")
            if origin and origin.lower() not in {"null", "none", "undefined"}:
                origins.append(origin)
        return origins


@lru_cache
def get_settings() -> Settings:
    return Settings()
