"""
Order service: converts carts into orders and reads the order history.
"""
import logging
from datetime import datetime
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.write_concern import WriteConcern

from shopcart.core.exceptions import CartConflict, EmptyCart, OrderHistoryUnavailable
from shopcart.models.cart import Cart
from shopcart.models.order import Order
from shopcart.services.cart_store import CartStore

logger = logging.getLogger(__name__)

# The order must be durable before the cart it came from is deleted
ORDER_WRITE_CONCERN = WriteConcern(w="majority", j=True)


class OrderService:
    """Service class for order placement and history."""
    
    @staticmethod
    async def create_order(user_email: str, cart: Cart, db: AsyncIOMotorDatabase) -> Order:
        """
        Write an order for the cart's current items to the order history.
        
        Orders are unique per cart_id, so a cart can only be ordered once
        even when several checkouts read it concurrently.
        
        Raises:
            EmptyCart: The cart was already turned into an order
            OrderHistoryUnavailable: The write was not acknowledged
        """
        order_data = {
            "user_email": user_email,
            "cart_id": cart.id,
            "items": [item.model_dump() for item in cart.items],
            "created_at": datetime.utcnow()
        }
        
        orders = db.orders.with_options(write_concern=ORDER_WRITE_CONCERN)
        try:
            result = await orders.insert_one(order_data)
        except DuplicateKeyError:
            logger.warning(f"Cart {cart.id} for {user_email} was already ordered")
            raise EmptyCart("Cart has already been ordered.")
        except PyMongoError as e:
            logger.error(f"Failed to write order for {user_email}: {str(e)}")
            raise OrderHistoryUnavailable()
        
        order_data["_id"] = result.inserted_id
        return Order.from_document(order_data)
    
    @staticmethod
    async def place_order(cart: Optional[Cart], db: AsyncIOMotorDatabase) -> Order:
        """
        Convert a cart into an order, then delete the cart.
        
        The order is written first; if that fails the cart is left intact.
        
        Raises:
            EmptyCart: No cart, a cart without items, or a cart already ordered
            OrderHistoryUnavailable: The order could not be written
        """
        if cart is None or not cart.items:
            raise EmptyCart()
        
        order = await OrderService.create_order(cart.user_email, cart, db)
        logger.info(f"Placed order {order.id} for {cart.user_email} ({len(cart.items)} items)")
        
        try:
            await CartStore.clear(cart, db)
        except (PyMongoError, CartConflict) as e:
            # The order stands; a stale cart is left for the user to clear
            logger.error(f"Order {order.id} placed but cart for {cart.user_email} not cleared: {str(e)}")
        return order
    
    @staticmethod
    async def get_orders_by_user_email(user_email: str, db: AsyncIOMotorDatabase) -> List[Order]:
        """Get a user's orders, newest first."""
        try:
            cursor = db.orders.find({"user_email": user_email}).sort("created_at", DESCENDING)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Failed to read orders for {user_email}: {str(e)}")
            raise OrderHistoryUnavailable("Failed to load orders.")
        
        return [Order.from_document(document) for document in documents]
