"""
Cart Errors

Error message constants and the exception kinds raised by the cart core.
Routers translate these into HTTP responses; ContextExpiredError never
leaves the cart orchestrator.
"""

# Lookup errors
ERROR_NOT_FOUND_TEMPLATE = "{resource} with ID '{identifier}' does not exist"
ERROR_CONTEXT_EXPIRED = "Cart context expired"

# Business rule errors
ERROR_MAX_ITEMS_REACHED = "Cart has reached maximum of {max_items} items"
ERROR_MAX_ITEMS_EXCEEDED = "Cart exceeds maximum of {max_items} items"
ERROR_PLAN_REQUIRES_PHONE = "Cart contains plans but no phone. Plans require a phone."
ERROR_SINGLE_PHONE = "Only one phone is allowed per cart"
ERROR_SINGLE_PLAN = "Only one plan is allowed per cart"
ERROR_INVALID_QUANTITIES = "Cart contains items with invalid quantities"
ERROR_INVALID_QUANTITY = "Quantity must be a positive integer"

# Generic errors
ERROR_INTERNAL = "Internal server error"


class CartError(Exception):
    """Base class for every error raised by the cart core."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CartError):
    """A cart, product, or item does not exist."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            ERROR_NOT_FOUND_TEMPLATE.format(resource=resource, identifier=identifier)
        )
        self.resource = resource
        self.identifier = identifier


class ItemNotFoundError(NotFoundError):
    """An item id is unknown to the live context."""

    def __init__(self, item_id: str):
        super().__init__("Item", item_id)


class ContextExpiredError(CartError):
    """The provider context is expired or unknown."""

    def __init__(self, context_id: str):
        super().__init__(ERROR_CONTEXT_EXPIRED)
        self.context_id = context_id


class BusinessRuleViolation(CartError):
    """A telecom cart composition rule would be broken."""


class ContextRecoveryError(CartError):
    """A replacement context could not be rebuilt from the shadow store."""

    def __init__(self, cart_id: str):
        super().__init__(f"Failed to restore context for cart '{cart_id}'")
        self.cart_id = cart_id
