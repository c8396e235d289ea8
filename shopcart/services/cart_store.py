"""
Persistence of the per-user cart document.

Every mutation is an optimistic transaction on the cart's ``version``: the
write only applies if the version is still the one that was read, and a
lost race re-reads the cart and re-applies the mutation.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from shopcart.core.config import settings
from shopcart.core.exceptions import CartConflict, CartNotFound, ItemNotFound
from shopcart.models.cart import Cart, CartItem

logger = logging.getLogger(__name__)


def _find_item_index(cart: Cart, product_id: str) -> int:
    """Index of the first item for product_id, or -1."""
    for index, item in enumerate(cart.items):
        if str(item.product_id) == str(product_id):
            return index
    return -1


class CartStore:
    """Storage operations over the carts collection."""
    
    @staticmethod
    async def find(user_email: str, db: AsyncIOMotorDatabase) -> Optional[Cart]:
        """Get a user's cart, or None."""
        document = await db.carts.find_one({"user_email": user_email})
        if not document:
            return None
        return Cart.from_document(document)
    
    @staticmethod
    async def get(user_email: str, db: AsyncIOMotorDatabase) -> Cart:
        """Get a user's cart or raise CartNotFound."""
        cart = await CartStore.find(user_email, db)
        if cart is None:
            raise CartNotFound()
        return cart
    
    @staticmethod
    async def _insert(cart: Cart, db: AsyncIOMotorDatabase) -> bool:
        """Insert a new cart. Returns False if another request created one first."""
        try:
            result = await db.carts.insert_one(cart.to_document())
        except DuplicateKeyError:
            return False
        cart.id = str(result.inserted_id)
        logger.info(f"Created cart for {cart.user_email}")
        return True
    
    @staticmethod
    async def _replace(cart: Cart, expected_version: int, db: AsyncIOMotorDatabase) -> bool:
        """Write items if the stored version still matches. Returns False on a lost race."""
        result = await db.carts.update_one(
            {"user_email": cart.user_email, "version": expected_version},
            {"$set": {
                "items": [item.model_dump() for item in cart.items],
                "version": cart.version
            }}
        )
        return result.matched_count == 1
    
    @staticmethod
    async def update(
        user_email: str,
        mutate: Callable[[Cart], None],
        db: AsyncIOMotorDatabase,
        create: bool = False
    ) -> Cart:
        """
        Apply ``mutate`` to the user's cart and persist it.
        
        Args:
            user_email: Cart owner
            mutate: Changes the cart in place; may raise to abort
            db: Database
            create: Create the cart if the user has none
        
        Raises:
            CartNotFound: No cart and create is False
            CartConflict: Lost the race CART_WRITE_RETRIES times in a row
        """
        for attempt in range(1, settings.CART_WRITE_RETRIES + 1):
            cart = await CartStore.find(user_email, db)
            
            if cart is None:
                if not create:
                    raise CartNotFound()
                cart = Cart(user_email=user_email, created_at=datetime.utcnow())
                mutate(cart)
                cart.version = 1
                if await CartStore._insert(cart, db):
                    return cart
            else:
                expected_version = cart.version
                mutate(cart)
                cart.version = expected_version + 1
                if await CartStore._replace(cart, expected_version, db):
                    return cart
            
            logger.warning(
                f"Concurrent update on cart for {user_email}, retrying "
                f"(attempt {attempt}/{settings.CART_WRITE_RETRIES})"
            )
        
        raise CartConflict()
    
    @staticmethod
    async def add_items(user_email: str, items: List[CartItem], db: AsyncIOMotorDatabase) -> Cart:
        """Append items to the user's cart, creating the cart if needed."""
        def append(cart: Cart):
            cart.items.extend(items)
        
        return await CartStore.update(user_email, append, db, create=True)
    
    @staticmethod
    async def remove_item(user_email: str, product_id: str, db: AsyncIOMotorDatabase) -> Cart:
        """Remove the first line item for product_id."""
        def remove(cart: Cart):
            index = _find_item_index(cart, product_id)
            if index == -1:
                raise ItemNotFound()
            del cart.items[index]
        
        return await CartStore.update(user_email, remove, db)
    
    @staticmethod
    async def set_quantity(
        user_email: str,
        product_id: str,
        quantity: int,
        db: AsyncIOMotorDatabase
    ) -> Cart:
        """Overwrite the quantity of the first line item for product_id."""
        def overwrite(cart: Cart):
            index = _find_item_index(cart, product_id)
            if index == -1:
                raise ItemNotFound()
            cart.items[index].quantity = quantity
        
        return await CartStore.update(user_email, overwrite, db)
    
    @staticmethod
    async def clear(cart: Cart, db: AsyncIOMotorDatabase) -> None:
        """
        Delete a cart that has just been converted into an order.
        
        If items were added since the cart was read, they are moved into a
        fresh cart (new id), so the ordered cart id is never reused.
        """
        for attempt in range(1, settings.CART_WRITE_RETRIES + 1):
            current = await CartStore.find(cart.user_email, db)
            if current is None or current.id != cart.id:
                return
            
            leftover = list(current.items)
            for item in cart.items:
                if item in leftover:
                    leftover.remove(item)
            
            result = await db.carts.delete_one(
                {"user_email": cart.user_email, "version": current.version}
            )
            if result.deleted_count == 1:
                if leftover:
                    logger.warning(
                        f"Cart for {cart.user_email} changed during checkout, "
                        f"keeping {len(leftover)} new items in a fresh cart"
                    )
                    await CartStore.add_items(cart.user_email, leftover, db)
                return
            
            logger.warning(
                f"Concurrent update while clearing cart for {cart.user_email}, retrying "
                f"(attempt {attempt}/{settings.CART_WRITE_RETRIES})"
            )
        
        raise CartConflict()
