"""
Errors raised by the cart services.

Every error is an HTTPException so FastAPI renders it directly, and carries
an ErrorKind so callers can branch on a closed set instead of inspecting
status codes or messages.
"""
from enum import Enum
from typing import Optional

from fastapi import HTTPException, status


class ErrorKind(str, Enum):
    """Error taxonomy."""
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    PRECONDITION = "precondition"
    UPSTREAM = "upstream"


class CartServiceError(HTTPException):
    """Base class for all cart service errors."""
    kind: ErrorKind = ErrorKind.UPSTREAM
    status_code_for_kind = {
        ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
        ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
        ErrorKind.PRECONDITION: status.HTTP_400_BAD_REQUEST,
        ErrorKind.UPSTREAM: status.HTTP_502_BAD_GATEWAY,
    }
    default_detail = "Cart service failure"
    
    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=self.status_code_for_kind[self.kind],
            detail=detail or self.default_detail
        )


# Not found

class CartNotFound(CartServiceError):
    kind = ErrorKind.NOT_FOUND
    default_detail = "Cart not found for the user."


class ItemNotFound(CartServiceError):
    kind = ErrorKind.NOT_FOUND
    default_detail = "Product not found in the cart."


class ProductNotFound(CartServiceError):
    """The product catalog reported that a product does not exist."""
    kind = ErrorKind.NOT_FOUND
    
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found.")


class NoOrdersFound(CartServiceError):
    kind = ErrorKind.NOT_FOUND
    default_detail = "No orders found for the user."


# Conflict

class CouponAlreadyUsed(CartServiceError):
    kind = ErrorKind.CONFLICT
    default_detail = "Coupon is not valid anymore."


class CartConflict(CartServiceError):
    """The cart kept changing underneath an update; the client may retry."""
    kind = ErrorKind.CONFLICT
    default_detail = "Cart was modified concurrently, please retry."


# Precondition

class EmptyCart(CartServiceError):
    kind = ErrorKind.PRECONDITION
    default_detail = "No items in the cart to place an order."


# Upstream

class ValidationUnavailable(CartServiceError):
    """
    The product catalog could not be queried.
    
    This does not mean the product is invalid, only that validation could
    not be completed.
    """
    kind = ErrorKind.UPSTREAM
    default_detail = "Failed to validate cart item."


class OrderHistoryUnavailable(CartServiceError):
    kind = ErrorKind.UPSTREAM
    default_detail = "Failed to place order."
