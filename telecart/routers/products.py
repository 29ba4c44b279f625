"""
Products API Router

Public read-only endpoints for the product catalog.
"""
from fastapi import APIRouter, Depends, HTTPException, Request

from telecart.cart import CartManager, get_cart_manager
from telecart.errors import NotFoundError
from .responses import envelope

router = APIRouter(prefix="/products", tags=["products"])


@router.get("")
async def get_products(request: Request, manager: CartManager = Depends(get_cart_manager)):
    """Get all available products"""
    return envelope(request, [p.to_dict() for p in manager.get_products()])


@router.get("/{product_id}")
async def get_product(product_id: str, request: Request, manager: CartManager = Depends(get_cart_manager)):
    """Get product by ID"""
    product = manager.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail=NotFoundError("Product", product_id).message)
    return envelope(request, product.to_dict())
