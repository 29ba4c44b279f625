"""
FastAPI Routers Package

All routers are included in api/index.py. Cart and product routers are
mounted under the versioned API prefix (/api/v1).
"""

from telecart.routers.carts import router as carts_router
from telecart.routers.cron import router as cron_router
from telecart.routers.products import router as products_router

__all__ = [
    "carts_router",
    "cron_router",
    "products_router",
]
