"""
Telecom Cart Core

This package contains:
- cart: context provider, cart manager, pricing and business rules
- config: environment-driven settings
- logging: centralized logger setup
- routers: FastAPI routers (carts, products, cron)
- sweeper: background task removing expired provider contexts

Note: Imports are lazy so that importing telecart.logging or telecart.config
does not pull in FastAPI.
"""

__all__ = [
    "get_cart_manager",
    "get_settings",
]

__version__ = "1.0.0"


def __getattr__(name):
    """Lazy attribute access for the common entry points."""
    if name == "get_cart_manager":
        from telecart.cart import get_cart_manager
        return get_cart_manager
    elif name == "get_settings":
        from telecart.config import get_settings
        return get_settings
    raise AttributeError(f"module 'telecart' has no attribute '{name}'")
