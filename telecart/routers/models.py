"""
Cart API Pydantic Models

Request bodies for cart endpoints. Field names accept the camelCase
wire names (productId) as well as snake_case.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator

from telecart.config import get_settings


def _check_quantity(value: int) -> int:
    limit = get_settings().max_quantity_per_item
    if value > limit:
        raise ValueError(f"Quantity cannot exceed {limit}")
    return value


# ==================== CART MODELS ====================

class AddItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(..., alias="productId", min_length=1, description="Catalog product id")
    quantity: int = Field(..., ge=1, strict=True, description="Units to add")

    @field_validator("product_id")
    @classmethod
    def _strip_product_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product ID is required")
        return v

    @field_validator("quantity")
    @classmethod
    def _quantity_limit(cls, v: int) -> int:
        return _check_quantity(v)


class UpdateItemRequest(BaseModel):
    quantity: int = Field(..., ge=1, strict=True, description="New quantity for the line")

    @field_validator("quantity")
    @classmethod
    def _quantity_limit(cls, v: int) -> int:
        return _check_quantity(v)
