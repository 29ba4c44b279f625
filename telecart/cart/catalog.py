"""Static product catalog (read-only, shared by all carts)."""
from decimal import Decimal
from types import MappingProxyType
from typing import List, Mapping, Optional

from .models import Product, ProductType

_PRODUCTS = [
    Product("phone_iphone15", "iPhone 15 Pro", ProductType.PHONE, Decimal("1399.99")),
    Product("phone_samsung_s24", "Samsung Galaxy S24", ProductType.PHONE, Decimal("1199.99")),
    Product("plan_unlimited", "Unlimited Plan", ProductType.PLAN, Decimal("85.00"), requires_phone=True),
    Product("plan_5gb", "5GB Plan", ProductType.PLAN, Decimal("55.00"), requires_phone=True),
    Product("addon_insurance", "Device Insurance", ProductType.ADDON, Decimal("12.00")),
    Product("addon_earbuds", "Wireless Earbuds", ProductType.ADDON, Decimal("199.99")),
]

PRODUCTS: Mapping[str, Product] = MappingProxyType({p.id: p for p in _PRODUCTS})


def list_products() -> List[Product]:
    """All products in catalog order."""
    return list(PRODUCTS.values())


def find_product(product_id: str) -> Optional[Product]:
    return PRODUCTS.get(product_id)
