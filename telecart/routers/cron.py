"""
Cron job endpoints for scheduled tasks.

Called by an external scheduler with CRON_SECRET authentication, as an
alternative (or complement) to the in-process context sweeper.
"""
from fastapi import APIRouter, Depends

from telecart.auth import verify_cron_secret
from telecart.cart import CartManager, get_cart_manager

router = APIRouter(prefix="/api/cron", tags=["cron"])


@router.get("/sweep-contexts")
async def cron_sweep_contexts(
    _: bool = Depends(verify_cron_secret),
    manager: CartManager = Depends(get_cart_manager),
):
    """Remove expired provider contexts. Returns how many were dropped."""
    return {"swept": manager.sweep_expired_contexts()}
