from typing import List
from datetime import datetime
from pydantic import BaseModel

from shopcart.schemas.cart import CartItemResponse


class OrderResponse(BaseModel):
    """Schema for order response."""
    id: str
    user_email: str
    items: List[CartItemResponse]
    created_at: datetime
    
    class Config:
        from_attributes = True
