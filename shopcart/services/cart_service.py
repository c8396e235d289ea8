from typing import List

from motor.motor_asyncio import AsyncIOMotorDatabase

from shopcart.core.exceptions import NoOrdersFound
from shopcart.models.cart import Cart, CartItem
from shopcart.models.order import Order
from shopcart.schemas.cart import CartItemInput
from shopcart.services.cart_store import CartStore
from shopcart.services.coupon_ledger import CouponLedger
from shopcart.services.order_service import OrderService
from shopcart.services.product_validator import ProductValidator


class CartService:
    """Service for cart operations, scoped to an authenticated user email."""
    
    def __init__(self, db: AsyncIOMotorDatabase, validator: ProductValidator = None):
        self.db = db
        self.validator = validator or ProductValidator()
    
    async def add_to_cart(self, user_email: str, items: List[CartItemInput]) -> Cart:
        """
        Add items to the user's cart, creating the cart on first use.
        
        All items are validated before anything is written, so a single
        unknown product fails the whole batch.
        """
        validated_items: List[CartItem] = []
        for item in items:
            validated_items.append(await self.validator.validate(item))
        
        return await CartStore.add_items(user_email, validated_items, self.db)
    
    async def get_cart(self, user_email: str) -> Cart:
        """Get the user's cart."""
        return await CartStore.get(user_email, self.db)
    
    async def delete_cart_item(self, user_email: str, product_id: str) -> Cart:
        """Remove a product from the user's cart."""
        return await CartStore.remove_item(user_email, product_id, self.db)
    
    async def update_quantity(self, user_email: str, product_id: str, quantity: int) -> Cart:
        """Set the quantity of a product in the user's cart."""
        return await CartStore.set_quantity(user_email, product_id, quantity, self.db)
    
    async def get_orders(self, user_email: str) -> List[Order]:
        """Get the user's orders."""
        orders = await OrderService.get_orders_by_user_email(user_email, self.db)
        if not orders:
            raise NoOrdersFound()
        return orders
    
    async def place_order(self, user_email: str) -> Order:
        """Turn the user's cart into an order and clear the cart."""
        cart = await CartStore.find(user_email, self.db)
        return await OrderService.place_order(cart, self.db)
    
    async def apply_coupon(self, user_email: str, coupon_code: str) -> int:
        """Redeem a coupon and return the discount amount."""
        return await CouponLedger.redeem(user_email, coupon_code, self.db)
