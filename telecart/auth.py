"""Authentication for scheduled jobs."""
from fastapi import Header, HTTPException

from telecart.config import get_settings


async def verify_cron_secret(
    authorization: str = Header(None, alias="Authorization")
):
    """
    Verify CRON_SECRET for scheduled jobs.

    Use for cron endpoints triggered by an external scheduler.
    """
    cron_secret = get_settings().cron_secret

    if not cron_secret:
        raise HTTPException(status_code=500, detail="CRON_SECRET not configured")

    if authorization != f"Bearer {cron_secret}":
        raise HTTPException(status_code=401, detail="Invalid CRON_SECRET")

    return True
