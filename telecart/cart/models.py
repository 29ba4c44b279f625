"""Cart models with Decimal-based pricing.

to_dict() methods produce the API wire format (camelCase keys, money as
JSON numbers).
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List
from uuid import uuid4

from telecart.money import to_decimal, to_float


def new_id(prefix: str, length: int) -> str:
    """Opaque prefixed identifier, e.g. cart_1a2b3c4d5e."""
    return f"{prefix}{uuid4().hex[:length]}"


class ProductType(str, Enum):
    """Product categories sold by the telecom store."""
    PHONE = "PHONE"
    PLAN = "PLAN"
    ADDON = "ADDON"


@dataclass(frozen=True)
class Product:
    """Static catalog entry."""
    id: str
    name: str
    type: ProductType
    price: Decimal
    requires_phone: bool = False

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "price": to_float(self.price),
        }
        if self.requires_phone:
            data["requiresPhone"] = True
        return data


@dataclass(frozen=True)
class ItemDraft:
    """Item contents handed to the context provider, before an id is assigned."""
    product_id: str
    product_name: str
    product_type: ProductType
    quantity: int
    unit_price: Decimal
    total_price: Decimal


@dataclass(frozen=True)
class CartItem:
    """Single line in a cart. Product fields are captured at add time."""
    id: str
    product_id: str
    product_name: str
    product_type: ProductType
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    @classmethod
    def from_draft(cls, item_id: str, draft: ItemDraft) -> "CartItem":
        return cls(
            id=item_id,
            product_id=draft.product_id,
            product_name=draft.product_name,
            product_type=draft.product_type,
            quantity=draft.quantity,
            unit_price=to_decimal(draft.unit_price),
            total_price=to_decimal(draft.total_price),
        )

    def to_draft(self) -> ItemDraft:
        """Strip the id (used when replaying into a fresh context)."""
        return ItemDraft(
            product_id=self.product_id,
            product_name=self.product_name,
            product_type=self.product_type,
            quantity=self.quantity,
            unit_price=self.unit_price,
            total_price=self.total_price,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "productName": self.product_name,
            "productType": self.product_type.value,
            "quantity": self.quantity,
            "unitPrice": to_float(self.unit_price),
            "totalPrice": to_float(self.total_price),
        }


@dataclass
class Context:
    """Handle to a live context in the external cart backend."""
    context_id: str
    cart_id: str
    created_at: datetime
    expires_at: datetime


@dataclass
class Cart:
    """Cart view, rebuilt from the shadow store on every read."""
    id: str
    items: List[CartItem]
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    created_at: datetime
    updated_at: datetime

    @property
    def item_count(self) -> int:
        """Number of line items."""
        return len(self.items)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "items": [item.to_dict() for item in self.items],
            "subtotal": to_float(self.subtotal),
            "tax": to_float(self.tax),
            "total": to_float(self.total),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }


@dataclass
class ValidationResult:
    """Outcome of running the cart rule set."""
    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}
