# prelovin/core/exceptions.py

from enum import Enum
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Lookup errors
    PRODUCT_NOT_FOUND = "PRODUCT_NOT_FOUND"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    CART_ITEM_NOT_FOUND = "CART_ITEM_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Authentication / authorization
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"

    # Business rules
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    STOCK_CONFLICT = "STOCK_CONFLICT"
    OWN_PRODUCT = "OWN_PRODUCT"
    EMPTY_CART = "EMPTY_CART"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"

    # System errors
    ORDER_PLACEMENT_FAILED = "ORDER_PLACEMENT_FAILED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

class PrelovinError(Exception):
    """Base exception for all Prelovin application errors."""

    def __init__(
        self,
        code: ErrorCode,
        user_message: str,
        technical_details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggested_action: Optional[str] = None
    ):
        self.code = code
        self.user_message = user_message
        self.technical_details = technical_details
        self.context = context or {}
        self.suggested_action = suggested_action

        logger.warning(
            f"Prelovin Error: {code.value}",
            extra={
                "error_code": code.value,
                "user_message": user_message,
                "technical_details": technical_details,
                "context": self.context,
            }
        )

        super().__init__(self.user_message)

    def to_response(self) -> Dict[str, Any]:
        """Convert to API response format."""
        response = {
            "error": {
                "code": self.code.value,
                "message": self.user_message,
                "context": self.context
            }
        }

        if self.suggested_action:
            response["error"]["suggested_action"] = self.suggested_action

        return response

class NotFoundError(PrelovinError):
    """A referenced entity does not exist."""

    def __init__(self, code: ErrorCode, entity: str, entity_id: Any):
        super().__init__(
            code=code,
            user_message=f"{entity} not found",
            context={"id": str(entity_id)}
        )

class AuthenticationError(PrelovinError):
    """Caller is not authenticated for an auth-required operation."""

    def __init__(self, message: str = "Not authenticated", technical_details: Optional[str] = None):
        self.message = message
        super().__init__(
            code=ErrorCode.NOT_AUTHENTICATED,
            user_message=message,
            technical_details=technical_details,
            suggested_action="Please log in again"
        )

class ForbiddenError(PrelovinError):
    """Caller is authenticated but does not own the resource."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(code=ErrorCode.FORBIDDEN, user_message=message, context=context)

class BusinessRuleError(PrelovinError):
    """Request shape was valid but the current state does not allow it."""

class InsufficientStockError(BusinessRuleError):

    def __init__(self, product_id: int, requested: int, available: Optional[int] = None, at_checkout: bool = False):
        context = {"product_id": product_id, "requested": requested}
        if available is not None:
            context["available"] = available
        super().__init__(
            code=ErrorCode.STOCK_CONFLICT if at_checkout else ErrorCode.INSUFFICIENT_STOCK,
            user_message="Not enough stock",
            context=context,
            suggested_action="Reduce the quantity or remove the item from your cart"
        )

class OwnProductError(BusinessRuleError):

    def __init__(self, product_id: int):
        super().__init__(
            code=ErrorCode.OWN_PRODUCT,
            user_message="Cannot buy your own product",
            context={"product_id": product_id}
        )

class EmptyCartError(BusinessRuleError):

    def __init__(self):
        super().__init__(code=ErrorCode.EMPTY_CART, user_message="Cart is empty")

class InvalidStatusTransitionError(BusinessRuleError):

    def __init__(self, current: str, requested: str):
        super().__init__(
            code=ErrorCode.INVALID_STATUS_TRANSITION,
            user_message=f"Cannot move order from '{current}' to '{requested}'",
            context={"current": current, "requested": requested}
        )

class OrderPlacementError(PrelovinError):
    """Order creation failed after it started writing; nothing was committed."""

    def __init__(self, user_message: str, technical_details: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            code=ErrorCode.ORDER_PLACEMENT_FAILED,
            user_message=user_message,
            technical_details=technical_details,
            context=context,
            suggested_action="Your cart was kept. Please try again."
        )

# Convenience functions for common errors
def raise_product_not_found(product_id: int):
    raise NotFoundError(ErrorCode.PRODUCT_NOT_FOUND, "Product", product_id)

def raise_order_not_found(order_id: int):
    raise NotFoundError(ErrorCode.ORDER_NOT_FOUND, "Order", order_id)

def raise_cart_item_not_found(cart_item_id: int):
    raise NotFoundError(ErrorCode.CART_ITEM_NOT_FOUND, "Cart item", cart_item_id)

def raise_user_not_found(user_id: str):
    raise NotFoundError(ErrorCode.USER_NOT_FOUND, "User", user_id)
