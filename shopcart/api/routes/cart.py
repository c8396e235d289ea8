from typing import List

from fastapi import APIRouter, Depends, status

from shopcart.api.deps import get_cart_service, get_current_user_email
from shopcart.models.cart import Cart
from shopcart.models.order import Order
from shopcart.schemas.cart import (
    AddToCartRequest,
    ApplyCouponRequest,
    CartResponse,
    CouponResponse,
    UpdateQuantityRequest
)
from shopcart.schemas.order import OrderResponse
from shopcart.services.cart_service import CartService

router = APIRouter()


def to_cart_response(cart: Cart) -> CartResponse:
    return CartResponse(
        user_email=cart.user_email,
        items=[item.model_dump() for item in cart.items],
        created_at=cart.created_at,
        total_items=len(cart.items)
    )


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        user_email=order.user_email,
        items=[item.model_dump() for item in order.items],
        created_at=order.created_at
    )


@router.post("", response_model=CartResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    request: AddToCartRequest,
    user_email: str = Depends(get_current_user_email),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Add products to the cart.
    
    Every product is checked against the product catalog first; if any is
    missing nothing is added.
    """
    cart = await cart_service.add_to_cart(user_email, request.items)
    return to_cart_response(cart)


@router.get("", response_model=CartResponse)
async def get_cart(
    user_email: str = Depends(get_current_user_email),
    cart_service: CartService = Depends(get_cart_service)
):
    """Get the current user's cart."""
    cart = await cart_service.get_cart(user_email)
    return to_cart_response(cart)


@router.delete("/delete-item/{product_id}", response_model=CartResponse)
async def delete_cart_item(
    product_id: str,
    user_email: str = Depends(get_current_user_email),
    cart_service: CartService = Depends(get_cart_service)
):
    """Remove an item from the cart."""
    cart = await cart_service.delete_cart_item(user_email, product_id)
    return to_cart_response(cart)


@router.get("/orders", response_model=List[OrderResponse])
async def get_orders(
    user_email: str = Depends(get_current_user_email),
    cart_service: CartService = Depends(get_cart_service)
):
    """Get the current user's orders, newest first."""
    orders = await cart_service.get_orders(user_email)
    return [to_order_response(order) for order in orders]


@router.post("/place-order", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def place_order(
    user_email: str = Depends(get_current_user_email),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Place an order from the cart.
    
    The order is recorded first, then the cart is deleted.
    """
    order = await cart_service.place_order(user_email)
    return to_order_response(order)


@router.post("/apply-coupon", response_model=CouponResponse)
async def apply_coupon(
    request: ApplyCouponRequest,
    user_email: str = Depends(get_current_user_email),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Redeem a coupon code.
    
    Returns the discount to subtract from the cart total. A code that gives
    a discount can only be used once per user.
    """
    discount = await cart_service.apply_coupon(user_email, request.coupon_code)
    return CouponResponse(coupon_code=request.coupon_code, discount=discount)


@router.patch("/update-quantity", response_model=CartResponse)
async def update_quantity(
    request: UpdateQuantityRequest,
    user_email: str = Depends(get_current_user_email),
    cart_service: CartService = Depends(get_cart_service)
):
    """Update the quantity of an item in the cart."""
    cart = await cart_service.update_quantity(user_email, request.product_id, request.quantity)
    return to_cart_response(cart)
