"""
Telecom Cart API - Main FastAPI Application

Single entry point for all API routes.
"""
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from telecart import __version__
from telecart.cart import get_cart_manager
from telecart.config import get_settings
from telecart.logging import get_logger
from telecart.middleware import RequestIdMiddleware
from telecart.routers import carts_router, cron_router, products_router
from telecart.sweeper import start_context_sweeper, stop_context_sweeper

logger = get_logger(__name__)

_started_at = time.monotonic()


# ==================== FASTAPI APP ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Startup
    settings = get_settings()
    logger.info(
        f"Telecom Cart API {__version__} starting: context TTL {settings.context_ttl_ms}ms, "
        f"tax rate {settings.tax_rate}, max items {settings.max_items_per_cart}"
    )
    sweeper = None
    if settings.sweep_enabled:
        sweeper = start_context_sweeper(get_cart_manager, settings.sweep_interval_seconds)
    yield
    # Shutdown
    await stop_context_sweeper(sweeper)
    logger.info("Telecom Cart API stopped")


app = FastAPI(
    title="Telecom Cart API",
    description="Shopping cart for phones, plans and add-ons on top of an expiring cart context",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIdMiddleware)

API_PREFIX = f"/api/v{get_settings().api_version.lstrip('v')}"

app.include_router(carts_router, prefix=API_PREFIX)
app.include_router(products_router, prefix=API_PREFIX)
app.include_router(cron_router)


# ==================== HEALTH CHECK ====================

@app.get("/api/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "service": "telecom-cart",
        "uptime": round(time.monotonic() - _started_at, 3),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("api.index:app", host="0.0.0.0", port=get_settings().port)
