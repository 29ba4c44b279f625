"""
Expired-context sweeper.

Background task owned by the application lifespan. Every interval it asks
the cart manager to drop provider contexts whose TTL has lapsed, so
abandoned carts do not grow memory without bound.
"""
import asyncio
from typing import Callable, Optional

from telecart.cart import CartManager
from telecart.logging import get_logger

logger = get_logger(__name__)


async def run_context_sweeper(
    get_manager: Callable[[], CartManager],
    interval_seconds: float,
    max_runs: Optional[int] = None,
) -> None:
    """
    Sweep expired contexts forever (or max_runs times).

    The manager is looked up on every pass so a reset singleton is picked up.
    A failing pass is logged and the loop keeps going; cancellation stops it.
    """
    runs = 0
    while max_runs is None or runs < max_runs:
        await asyncio.sleep(interval_seconds)
        runs += 1
        try:
            get_manager().sweep_expired_contexts()
        except Exception as e:
            logger.error(f"Context sweep failed: {e}", exc_info=True)


def start_context_sweeper(
    get_manager: Callable[[], CartManager],
    interval_seconds: float,
) -> asyncio.Task:
    """Schedule the sweeper on the running loop."""
    logger.info(f"Context sweeper started (every {interval_seconds:g}s)")
    return asyncio.create_task(
        run_context_sweeper(get_manager, interval_seconds),
        name="context-sweeper",
    )


async def stop_context_sweeper(task: Optional[asyncio.Task]) -> None:
    """Cancel the sweeper task and wait for it to finish."""
    if task is None or task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        logger.info("Context sweeper stopped")
