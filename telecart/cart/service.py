"""Cart manager: stable carts on top of expiring provider contexts."""
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, Dict, List, Optional, TypeVar

from telecart.config import get_settings
from telecart.errors import (
    ERROR_INVALID_QUANTITY,
    BusinessRuleViolation,
    ContextExpiredError,
    ContextRecoveryError,
    NotFoundError,
)
from telecart.logging import get_logger, sanitize_id_for_logging
from .catalog import find_product, list_products
from .context_provider import Clock, ContextProvider, utc_now
from .models import Cart, CartItem, Context, ItemDraft, Product, ValidationResult, new_id
from .pricing import calculate_item_total, calculate_subtotal, calculate_tax, calculate_total
from .rules import can_add_item_type, is_valid_quantity, validate_cart_rules

logger = get_logger(__name__)

T = TypeVar("T")


class CartManager:
    """
    Owns every cart and is the only caller of the ContextProvider.

    Two stores per cart:
    - the provider context (live, expires after its TTL)
    - the shadow item list kept here (survives expiry)

    ensure_valid_context() is the only place the two are reconciled: when the
    cached context is gone it opens a new one and replays the shadow into it.
    Replayed items get new ids from the provider, so item ids held by a client
    before a recovery are no longer valid afterwards.
    """

    def __init__(
        self,
        provider: ContextProvider,
        tax_rate: Decimal = Decimal("0.13"),
        max_items: int = 50,
        clock: Clock = utc_now,
    ):
        self._provider = provider
        self._tax_rate = tax_rate
        self._max_items = max_items
        self._clock = clock
        self._contexts: Dict[str, Context] = {}
        self._shadow: Dict[str, List[CartItem]] = {}
        self._created_at: Dict[str, datetime] = {}
        self._updated_at: Dict[str, datetime] = {}

    # ==================== CONTEXT MANAGEMENT ====================

    async def initialize_cart(self) -> Cart:
        """Create an empty cart with a fresh provider context."""
        cart_id = new_id("cart_", 10)
        context = await self._provider.create_context(cart_id)

        now = self._clock()
        self._contexts[cart_id] = context
        self._shadow[cart_id] = []
        self._created_at[cart_id] = now
        self._updated_at[cart_id] = now

        logger.info(f"Cart initialized: {cart_id} (context {context.context_id})")
        return self._build_cart(cart_id)

    async def ensure_valid_context(self, cart_id: str) -> str:
        """Return a live context id for cart_id, recovering it if it expired."""
        context = self._contexts.get(cart_id)
        if context is None:
            raise NotFoundError("Cart", cart_id)

        if self._provider.is_valid(context.context_id):
            return context.context_id

        return await self._recover(cart_id)

    async def _recover(self, cart_id: str) -> str:
        """Open a new context and replay the shadow items into it."""
        shadow_items = self._shadow.get(cart_id, [])
        context = await self._provider.create_context(cart_id)

        replayed: List[CartItem] = []
        try:
            for item in shadow_items:
                replayed.append(await self._provider.add_item(context.context_id, item.to_draft()))
        except ContextExpiredError as e:
            logger.error(f"Replay into context {context.context_id} failed for cart {cart_id}")
            raise ContextRecoveryError(cart_id) from e

        previous = self._contexts.get(cart_id)
        self._contexts[cart_id] = context
        self._shadow[cart_id] = replayed

        logger.warning(
            f"Context expired for cart {cart_id}: "
            f"{previous.context_id if previous else 'N/A'} -> {context.context_id}, "
            f"replayed {len(replayed)} item(s)"
        )
        return context.context_id

    async def _call(self, cart_id: str, operation: Callable[[str], Awaitable[T]]) -> T:
        """
        Run a provider operation against the cart's context.

        If the context lapses between resolution and the call, recover once
        and retry.
        """
        context_id = await self.ensure_valid_context(cart_id)
        try:
            return await operation(context_id)
        except ContextExpiredError:
            context_id = await self._recover(cart_id)

        try:
            return await operation(context_id)
        except ContextExpiredError as e:
            raise ContextRecoveryError(cart_id) from e

    def expire_cart_context(self, cart_id: str) -> None:
        """Force the cart's current context to expire (test/ops hook)."""
        context = self._contexts.get(cart_id)
        if context is None:
            raise NotFoundError("Cart", cart_id)
        self._provider.expire_now(context.context_id)

    def get_context_id(self, cart_id: str) -> Optional[str]:
        """Context id currently cached for the cart, if any."""
        context = self._contexts.get(cart_id)
        return context.context_id if context else None

    def sweep_expired_contexts(self) -> int:
        """Garbage-collect expired provider contexts."""
        removed = self._provider.sweep_expired()
        if removed:
            logger.info(f"Swept {removed} expired context(s)")
        else:
            logger.debug("Context sweep: nothing to remove")
        return removed

    # ==================== CART OPERATIONS ====================

    async def get_cart(self, cart_id: str) -> Cart:
        """Read the cart from its live context and refresh the shadow."""
        items = await self._call(cart_id, self._provider.list_items)
        self._shadow[cart_id] = list(items)
        return self._build_cart(cart_id)

    async def add_item(self, cart_id: str, product_id: str, quantity: int) -> Cart:
        """Add a catalog product to the cart after checking the cart rules."""
        product = find_product(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        self._require_valid_quantity(quantity)

        async def _add(context_id: str) -> CartItem:
            current = await self._provider.list_items(context_id)
            check = can_add_item_type(current, product.type, self._max_items)
            if not check.allowed:
                logger.info(
                    f"Rejected {product.id} for cart {sanitize_id_for_logging(cart_id)}: {check.reason}"
                )
                raise BusinessRuleViolation(check.reason)

            draft = ItemDraft(
                product_id=product.id,
                product_name=product.name,
                product_type=product.type,
                quantity=quantity,
                unit_price=product.price,
                total_price=calculate_item_total(product.price, quantity),
            )
            return await self._provider.add_item(context_id, draft)

        item = await self._call(cart_id, _add)
        self._shadow[cart_id].append(item)
        self._touch(cart_id)
        return self._build_cart(cart_id)

    async def update_item(self, cart_id: str, item_id: str, quantity: int) -> Cart:
        """Change an item's quantity."""
        self._require_valid_quantity(quantity)

        updated = await self._call(
            cart_id, lambda context_id: self._provider.update_item(context_id, item_id, quantity)
        )

        shadow = self._shadow[cart_id]
        for index, item in enumerate(shadow):
            if item.id == item_id:
                shadow[index] = updated
                break
        self._touch(cart_id)
        return self._build_cart(cart_id)

    async def remove_item(self, cart_id: str, item_id: str) -> Cart:
        """Remove an item. Unknown item ids raise ItemNotFoundError."""
        await self._call(
            cart_id, lambda context_id: self._provider.remove_item(context_id, item_id)
        )

        self._shadow[cart_id] = [item for item in self._shadow[cart_id] if item.id != item_id]
        self._touch(cart_id)
        return self._build_cart(cart_id)

    async def clear_cart(self, cart_id: str) -> Cart:
        """Remove every item from the cart."""
        await self._call(cart_id, self._provider.clear_context)
        self._shadow[cart_id] = []
        self._touch(cart_id)
        return self._build_cart(cart_id)

    async def validate_cart(self, cart_id: str) -> ValidationResult:
        """Run the full rule set against the live items."""
        items = await self._call(cart_id, self._provider.list_items)
        return validate_cart_rules(items, self._max_items)

    # ==================== CATALOG ====================

    def get_products(self) -> List[Product]:
        return list_products()

    def get_product(self, product_id: str) -> Optional[Product]:
        return find_product(product_id)

    # ==================== HELPERS ====================

    @staticmethod
    def _require_valid_quantity(quantity) -> None:
        if not is_valid_quantity(quantity):
            raise BusinessRuleViolation(ERROR_INVALID_QUANTITY)

    def _touch(self, cart_id: str) -> None:
        self._updated_at[cart_id] = self._clock()

    def _build_cart(self, cart_id: str) -> Cart:
        items = list(self._shadow.get(cart_id, []))
        subtotal = calculate_subtotal(items)
        tax = calculate_tax(subtotal, self._tax_rate)
        return Cart(
            id=cart_id,
            items=items,
            subtotal=subtotal,
            tax=tax,
            total=calculate_total(subtotal, tax),
            created_at=self._created_at[cart_id],
            updated_at=self._updated_at[cart_id],
        )


# Singleton instance
_cart_manager: Optional[CartManager] = None


def get_cart_manager() -> CartManager:
    """Get CartManager singleton, built from the current settings."""
    global _cart_manager
    if _cart_manager is None:
        settings = get_settings()
        provider = ContextProvider(ttl_seconds=settings.context_ttl_seconds)
        _cart_manager = CartManager(
            provider,
            tax_rate=settings.tax_rate,
            max_items=settings.max_items_per_cart,
        )
    return _cart_manager


def reset_cart_manager() -> None:
    """Drop the singleton; the next get_cart_manager() starts empty."""
    global _cart_manager
    _cart_manager = None
