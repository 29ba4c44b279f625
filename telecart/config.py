"""
Application configuration.

Settings are read from environment variables once and cached.
Invalid numeric values fall back to the default (logged as a warning).
"""
import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from typing import Optional

from telecart.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONTEXT_TTL_MS = 5 * 60 * 1000
DEFAULT_TAX_RATE = Decimal("0.13")
DEFAULT_MAX_ITEMS_PER_CART = 50
DEFAULT_MAX_QUANTITY_PER_ITEM = 10
DEFAULT_API_VERSION = "v1"


def _get_env(*keys: str) -> Optional[str]:
    """Return the first non-empty value among the given variable names."""
    for key in keys:
        value = os.environ.get(key)
        if value is not None and value.strip() != "":
            return value.strip()
    return None


def _get_positive_int(*keys: str, default: int) -> int:
    raw = _get_env(*keys)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Invalid value for {keys[0]}: {raw!r}, using {default}")
        return default
    if value <= 0:
        logger.warning(f"{keys[0]} must be positive, got {value}, using {default}")
        return default
    return value


def _get_rate(key: str, default: Decimal) -> Decimal:
    raw = _get_env(key)
    if raw is None:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation:
        logger.warning(f"Invalid value for {key}: {raw!r}, using {default}")
        return default
    if not value.is_finite() or value < 0:
        logger.warning(f"{key} must be a non-negative number, got {raw!r}, using {default}")
        return default
    return value


def _get_bool(key: str, default: bool) -> bool:
    raw = _get_env(key)
    if raw is None:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the cart core and the HTTP layer."""
    context_ttl_ms: int = DEFAULT_CONTEXT_TTL_MS
    tax_rate: Decimal = DEFAULT_TAX_RATE
    max_items_per_cart: int = DEFAULT_MAX_ITEMS_PER_CART
    max_quantity_per_item: int = DEFAULT_MAX_QUANTITY_PER_ITEM
    sweep_interval_ms: int = DEFAULT_CONTEXT_TTL_MS // 2
    sweep_enabled: bool = True
    api_version: str = DEFAULT_API_VERSION
    cron_secret: str = ""
    port: int = 3000

    @property
    def context_ttl_seconds(self) -> float:
        return self.context_ttl_ms / 1000

    @property
    def sweep_interval_seconds(self) -> float:
        return self.sweep_interval_ms / 1000


def load_settings() -> Settings:
    """Build Settings from the current environment."""
    ttl_ms = _get_positive_int("CONTEXT_TTL_MS", "SF_CONTEXT_TTL", default=DEFAULT_CONTEXT_TTL_MS)
    return Settings(
        context_ttl_ms=ttl_ms,
        tax_rate=_get_rate("TAX_RATE", DEFAULT_TAX_RATE),
        max_items_per_cart=_get_positive_int("MAX_ITEMS_PER_CART", default=DEFAULT_MAX_ITEMS_PER_CART),
        max_quantity_per_item=_get_positive_int(
            "MAX_QUANTITY_PER_ITEM", default=DEFAULT_MAX_QUANTITY_PER_ITEM
        ),
        sweep_interval_ms=_get_positive_int("SWEEP_INTERVAL_MS", default=max(ttl_ms // 2, 1)),
        sweep_enabled=_get_bool("CONTEXT_SWEEP_ENABLED", True),
        api_version=_get_env("API_VERSION") or DEFAULT_API_VERSION,
        cron_secret=_get_env("CRON_SECRET") or "",
        port=_get_positive_int("PORT", default=3000),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached Settings (call get_settings.cache_clear() after changing env)."""
    return load_settings()
