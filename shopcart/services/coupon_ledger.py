"""
One-time coupon redemption per user.
"""
import logging

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from shopcart.core.exceptions import CouponAlreadyUsed
from shopcart.models.coupon import CouponRedemption

logger = logging.getLogger(__name__)


class CouponLedger:
    """Tracks which coupon codes each user has already redeemed."""
    
    # Coupon code -> discount amount. Unknown codes are worth nothing.
    DISCOUNTS = {
        "rahma": 50,
    }
    
    @staticmethod
    def discount_for(coupon_code: str) -> int:
        """Discount amount for a coupon code."""
        return CouponLedger.DISCOUNTS.get(coupon_code, 0)
    
    @staticmethod
    async def is_redeemed(user_email: str, coupon_code: str, db: AsyncIOMotorDatabase) -> bool:
        """Check whether the user already redeemed this code."""
        redemption = await db.coupon_redemptions.find_one(
            {"user_email": user_email, "coupon_code": coupon_code}
        )
        return redemption is not None
    
    @staticmethod
    async def redeem(user_email: str, coupon_code: str, db: AsyncIOMotorDatabase) -> int:
        """
        Redeem a coupon for a user and return its discount.
        
        Only a non-zero discount consumes the code: codes worth nothing are
        never recorded and can be applied any number of times. Applying the
        discount to a total is up to the caller.
        
        Raises:
            CouponAlreadyUsed: The user already redeemed this code
        """
        if await CouponLedger.is_redeemed(user_email, coupon_code, db):
            raise CouponAlreadyUsed()
        
        discount = CouponLedger.discount_for(coupon_code)
        
        if discount > 0:
            redemption = CouponRedemption(
                user_email=user_email,
                coupon_code=coupon_code,
                discount=discount
            )
            # The unique index on (user_email, coupon_code) settles concurrent redemptions
            try:
                await db.coupon_redemptions.insert_one(redemption.model_dump())
            except DuplicateKeyError:
                raise CouponAlreadyUsed()
            logger.info(f"Coupon {coupon_code} redeemed by {user_email} for {discount}")
        
        return discount
