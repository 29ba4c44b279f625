"""Cart pricing.

Every step is rounded to cents on its own; totals are never computed from
unrounded intermediates.
"""
from decimal import Decimal
from typing import Iterable

from telecart.money import add, multiply, round_money, to_decimal
from .models import CartItem


def calculate_item_total(unit_price, quantity: int) -> Decimal:
    """Line total: unit price x quantity."""
    return round_money(multiply(unit_price, quantity))


def calculate_subtotal(items: Iterable[CartItem]) -> Decimal:
    """Sum of line totals."""
    subtotal = Decimal("0")
    for item in items:
        subtotal = add(subtotal, item.total_price)
    return round_money(subtotal)


def calculate_tax(subtotal, tax_rate) -> Decimal:
    return round_money(multiply(subtotal, to_decimal(tax_rate)))


def calculate_total(subtotal, tax) -> Decimal:
    return round_money(add(subtotal, tax))
