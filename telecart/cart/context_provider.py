"""
Simulated external cart-context backend.

Emulates a remote commerce system that holds cart items under short-lived
context handles. Nothing is persisted; a context and its items disappear
once its TTL lapses and the next sweep runs.

Rules:
- An expired context and an unknown context look the same to callers
  (ContextExpiredError).
- Pricing is the caller's job on add; on update the stored unit price is
  multiplied out again.
- Creating a context for a cart never invalidates older ones; superseded
  contexts are left to expire and be swept.
"""
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from telecart.errors import ContextExpiredError, ItemNotFoundError
from telecart.logging import get_logger
from .models import CartItem, Context, ItemDraft, new_id
from .pricing import calculate_item_total

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ContextProvider:
    """
    In-memory stand-in for the external cart-context service.

    Coroutine methods mirror remote calls; the plain methods are local
    queries and ops hooks.
    """

    def __init__(self, ttl_seconds: float, clock: Clock = utc_now):
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self._contexts: Dict[str, Context] = {}
        self._items: Dict[str, List[CartItem]] = {}

    # ==================== CONTEXTS ====================

    async def create_context(self, cart_id: str) -> Context:
        """Open a new, empty context for cart_id."""
        now = self._clock()
        context = Context(
            context_id=new_id("ctx_", 12),
            cart_id=cart_id,
            created_at=now,
            expires_at=now + self._ttl,
        )
        self._contexts[context.context_id] = context
        self._items[context.context_id] = []
        logger.debug(f"Context created: {context.context_id} for cart {cart_id}")
        return replace(context)

    def is_valid(self, context_id: str) -> bool:
        """True if the context exists and has not expired."""
        context = self._contexts.get(context_id)
        if context is None:
            return False
        return self._clock() < context.expires_at

    def get_context(self, context_id: str) -> Optional[Context]:
        """Inspect a context (expired ones included until swept)."""
        context = self._contexts.get(context_id)
        return replace(context) if context else None

    @property
    def active_context_count(self) -> int:
        """Number of stored contexts, swept or not yet swept."""
        return len(self._contexts)

    def expire_now(self, context_id: str) -> None:
        """Force a context's expiry into the past (test/ops hook)."""
        context = self._contexts.get(context_id)
        if context is not None:
            context.expires_at = self._clock() - timedelta(seconds=1)

    def sweep_expired(self) -> int:
        """Delete expired contexts and their items. Returns how many were removed."""
        now = self._clock()
        expired = [cid for cid, ctx in self._contexts.items() if now >= ctx.expires_at]
        for context_id in expired:
            del self._contexts[context_id]
            self._items.pop(context_id, None)
        return len(expired)

    # ==================== ITEMS ====================

    def _live_items(self, context_id: str) -> List[CartItem]:
        if not self.is_valid(context_id):
            raise ContextExpiredError(context_id)
        return self._items.setdefault(context_id, [])

    @staticmethod
    def _index_of(items: List[CartItem], item_id: str) -> int:
        for index, item in enumerate(items):
            if item.id == item_id:
                return index
        raise ItemNotFoundError(item_id)

    async def list_items(self, context_id: str) -> List[CartItem]:
        """Items of a live context, in insertion order."""
        return list(self._live_items(context_id))

    async def add_item(self, context_id: str, draft: ItemDraft) -> CartItem:
        """Store draft under a fresh item id."""
        items = self._live_items(context_id)
        item = CartItem.from_draft(new_id("item_", 8), draft)
        items.append(item)
        return item

    async def update_item(self, context_id: str, item_id: str, quantity: int) -> CartItem:
        """Change an item's quantity and reprice it from the stored unit price."""
        items = self._live_items(context_id)
        index = self._index_of(items, item_id)
        current = items[index]
        updated = replace(
            current,
            quantity=quantity,
            total_price=calculate_item_total(current.unit_price, quantity),
        )
        items[index] = updated
        return updated

    async def remove_item(self, context_id: str, item_id: str) -> None:
        items = self._live_items(context_id)
        del items[self._index_of(items, item_id)]

    async def clear_context(self, context_id: str) -> None:
        """Drop every item of a live context."""
        self._live_items(context_id).clear()
