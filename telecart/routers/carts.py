"""
Carts Router

Cart lifecycle endpoints. Every handler is a thin wrapper around one
CartManager operation; the manager hides provider context expiry, so
handlers only ever see NotFoundError or BusinessRuleViolation.
"""
from fastapi import APIRouter, Depends, HTTPException, Request

from telecart.cart import CartManager, get_cart_manager
from telecart.errors import ERROR_INTERNAL, CartError
from telecart.logging import get_logger, sanitize_id_for_logging
from .models import AddItemRequest, UpdateItemRequest
from .responses import envelope, raise_http_error

logger = get_logger(__name__)

router = APIRouter(prefix="/carts", tags=["carts"])


def _unexpected(action: str, cart_id: str, error: Exception) -> HTTPException:
    logger.error(
        f"Failed to {action} for cart {sanitize_id_for_logging(cart_id)}: {error}",
        exc_info=True,
    )
    return HTTPException(status_code=500, detail=ERROR_INTERNAL)


@router.post("", status_code=201)
async def initialize_cart(request: Request, manager: CartManager = Depends(get_cart_manager)):
    """Create a new empty cart."""
    try:
        cart = await manager.initialize_cart()
    except CartError as e:
        raise_http_error(e)
    except Exception as e:
        raise _unexpected("initialize cart", "new", e)
    return envelope(request, cart.to_dict())


@router.get("/{cart_id}")
async def get_cart(cart_id: str, request: Request, manager: CartManager = Depends(get_cart_manager)):
    """Get cart contents and totals."""
    try:
        cart = await manager.get_cart(cart_id)
    except CartError as e:
        raise_http_error(e)
    except Exception as e:
        raise _unexpected("read cart", cart_id, e)
    return envelope(request, cart.to_dict())


@router.post("/{cart_id}/items")
async def add_item(
    cart_id: str,
    body: AddItemRequest,
    request: Request,
    manager: CartManager = Depends(get_cart_manager),
):
    """Add a product to the cart (phone/plan limits and max items apply)."""
    try:
        cart = await manager.add_item(cart_id, body.product_id, body.quantity)
    except CartError as e:
        raise_http_error(e)
    except Exception as e:
        raise _unexpected("add item", cart_id, e)
    return envelope(request, cart.to_dict())


@router.patch("/{cart_id}/items/{item_id}")
async def update_item(
    cart_id: str,
    item_id: str,
    body: UpdateItemRequest,
    request: Request,
    manager: CartManager = Depends(get_cart_manager),
):
    """Change the quantity of a cart line."""
    try:
        cart = await manager.update_item(cart_id, item_id, body.quantity)
    except CartError as e:
        raise_http_error(e)
    except Exception as e:
        raise _unexpected("update item", cart_id, e)
    return envelope(request, cart.to_dict())


@router.delete("/{cart_id}/items/{item_id}")
async def remove_item(
    cart_id: str,
    item_id: str,
    request: Request,
    manager: CartManager = Depends(get_cart_manager),
):
    """Remove a cart line. Unknown item ids are a 404."""
    try:
        cart = await manager.remove_item(cart_id, item_id)
    except CartError as e:
        raise_http_error(e)
    except Exception as e:
        raise _unexpected("remove item", cart_id, e)
    return envelope(request, cart.to_dict())


@router.delete("/{cart_id}/items")
async def clear_cart(cart_id: str, request: Request, manager: CartManager = Depends(get_cart_manager)):
    """Remove every line from the cart."""
    try:
        cart = await manager.clear_cart(cart_id)
    except CartError as e:
        raise_http_error(e)
    except Exception as e:
        raise _unexpected("clear cart", cart_id, e)
    return envelope(request, cart.to_dict())


@router.get("/{cart_id}/validate")
async def validate_cart(cart_id: str, request: Request, manager: CartManager = Depends(get_cart_manager)):
    """Check the cart against the telecom rules without changing it."""
    try:
        result = await manager.validate_cart(cart_id)
    except CartError as e:
        raise_http_error(e)
    except Exception as e:
        raise _unexpected("validate cart", cart_id, e)
    return envelope(request, result.to_dict())
