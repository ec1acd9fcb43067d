import os
import time
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from common.dto import ErrorOut, HealthOut
from core.config import DEV_ORIGINS, get_settings
from core.db import close_inventory_pool, initialize_database
from core.middleware import install_middleware
from core.errors import install_handlers

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tables are created on server start, not at import, so tests never need a database
    if settings.INIT_DB_ON_STARTUP:
        initialize_database(settings)
    yield
    close_inventory_pool()


BOOT_T0 = time.time()
app = FastAPI(
    title='Studio Inventory API',
    version='1.0.0',
    docs_url='/api/docs',
    openapi_url='/api/openapi.json',
    lifespan=lifespan,
)

# --- CORS --------------------------------------------------------------------
allow_origins = settings.cors_origins()
if not allow_origins:
    allow_origins = DEV_ORIGINS
    print("🔧 Using default CORS origins for development")
logger.info(f"CORS origins: {allow_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware, minimum_size=1000, compresslevel=6)   # CSV exports and long lists

# --- Middleware & error handlers ---------------------------------------------
install_middleware(app)   # request timing log
install_handlers(app)     # AppError → JSON


# --- Health ------------------------------------------------------------------
@app.get('/api/health', response_model=HealthOut)
def health():
    return {'status': 'ok', 'uptime': round(time.time() - BOOT_T0, 2)}


# --- Inventory routers -------------------------------------------------------
from modules.inventory import assignments_router, categories_router, items_router, view_router

INVENTORY_API = '/api/v1/inventory'
ERROR_RESPONSES = {code: {'model': ErrorOut} for code in (401, 404, 409, 422)}
app.include_router(categories_router, prefix=INVENTORY_API, tags=['inventory-categories'], responses=ERROR_RESPONSES)
app.include_router(items_router, prefix=INVENTORY_API, tags=['inventory-items'], responses=ERROR_RESPONSES)
app.include_router(view_router, prefix=INVENTORY_API, tags=['inventory-view'], responses=ERROR_RESPONSES)
app.include_router(assignments_router, prefix=INVENTORY_API, tags=['inventory-assignments'], responses=ERROR_RESPONSES)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
