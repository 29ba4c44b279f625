"""
Telecom cart business rules.

Pure functions over a sequence of cart items:
- validate_cart_rules: full rule set, reports every violation in a fixed order
- can_add_item_type: pre-check run before an item is added
"""
from dataclasses import dataclass
from typing import Optional, Sequence

from telecart.errors import (
    ERROR_INVALID_QUANTITIES,
    ERROR_MAX_ITEMS_EXCEEDED,
    ERROR_MAX_ITEMS_REACHED,
    ERROR_PLAN_REQUIRES_PHONE,
    ERROR_SINGLE_PHONE,
    ERROR_SINGLE_PLAN,
)
from .models import CartItem, ProductType, ValidationResult


@dataclass(frozen=True)
class AddCheck:
    """Result of can_add_item_type."""
    allowed: bool
    reason: Optional[str] = None


def is_valid_quantity(quantity) -> bool:
    """Quantities are positive integers (bool is not a quantity)."""
    return isinstance(quantity, int) and not isinstance(quantity, bool) and quantity > 0


def _count(items: Sequence[CartItem], product_type: ProductType) -> int:
    return sum(1 for item in items if item.product_type == product_type)


def validate_cart_rules(items: Sequence[CartItem], max_items: int) -> ValidationResult:
    """
    Validate a cart against the telecom rules without changing it.

    Order of checks (and of the returned messages):
    max items, plan without phone, multiple phones, multiple plans,
    invalid quantities.
    """
    errors = []

    if len(items) > max_items:
        errors.append(ERROR_MAX_ITEMS_EXCEEDED.format(max_items=max_items))

    phone_count = _count(items, ProductType.PHONE)
    plan_count = _count(items, ProductType.PLAN)

    if plan_count > 0 and phone_count == 0:
        errors.append(ERROR_PLAN_REQUIRES_PHONE)

    if phone_count > 1:
        errors.append(ERROR_SINGLE_PHONE)

    if plan_count > 1:
        errors.append(ERROR_SINGLE_PLAN)

    if any(not is_valid_quantity(item.quantity) for item in items):
        errors.append(ERROR_INVALID_QUANTITIES)

    return ValidationResult(valid=not errors, errors=errors)


def can_add_item_type(
    items: Sequence[CartItem],
    product_type: ProductType,
    max_items: int,
) -> AddCheck:
    """
    Check whether one more item of product_type fits in the cart.

    Plans are accepted without a phone here; validate_cart_rules reports that case.
    """
    if len(items) >= max_items:
        return AddCheck(False, ERROR_MAX_ITEMS_REACHED.format(max_items=max_items))

    if product_type == ProductType.PHONE and _count(items, ProductType.PHONE) >= 1:
        return AddCheck(False, ERROR_SINGLE_PHONE)

    if product_type == ProductType.PLAN and _count(items, ProductType.PLAN) >= 1:
        return AddCheck(False, ERROR_SINGLE_PLAN)

    return AddCheck(True)
