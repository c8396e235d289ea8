from datetime import datetime
from pydantic import BaseModel, Field


class CouponRedemption(BaseModel):
    """One-time coupon redemption by a user. Never removed once written."""
    user_email: str
    coupon_code: str
    discount: int
    redeemed_at: datetime = Field(default_factory=datetime.utcnow)
