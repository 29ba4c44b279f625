"""Cart package: models, rules, context provider, and manager facade."""
from .context_provider import ContextProvider
from .models import Cart, CartItem, Context, ItemDraft, Product, ProductType, ValidationResult
from .service import CartManager, get_cart_manager, reset_cart_manager

__all__ = [
    "Cart",
    "CartItem",
    "CartManager",
    "Context",
    "ContextProvider",
    "ItemDraft",
    "Product",
    "ProductType",
    "ValidationResult",
    "get_cart_manager",
    "reset_cart_manager",
]
