from typing import Any, Dict, List, Optional
from datetime import datetime
from pydantic import BaseModel, Field

from shopcart.models.cart import PurchaseOption


class CartItemInput(BaseModel):
    """Schema for one proposed cart line item."""
    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    purchase_option: PurchaseOption = PurchaseOption.BUY
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    customization: Dict[str, Any] = Field(default_factory=dict)


class AddToCartRequest(BaseModel):
    """Schema for adding products to cart."""
    items: List[CartItemInput]
    
    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"product_id": "p1", "quantity": 2},
                    {
                        "product_id": "p7",
                        "quantity": 1,
                        "purchase_option": "rent",
                        "start_date": "2024-06-01T00:00:00",
                        "end_date": "2024-06-08T00:00:00"
                    }
                ]
            }
        }


class UpdateQuantityRequest(BaseModel):
    """Schema for updating cart item quantity."""
    product_id: str
    quantity: int
    
    class Config:
        json_schema_extra = {
            "example": {
                "product_id": "p1",
                "quantity": 5
            }
        }


class CartItemResponse(BaseModel):
    """Schema for cart item response."""
    product_id: str
    quantity: int
    purchase_option: PurchaseOption
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    customization: Dict[str, Any] = Field(default_factory=dict)
    
    class Config:
        from_attributes = True


class CartResponse(BaseModel):
    """Schema for cart response."""
    user_email: str
    items: List[CartItemResponse]
    created_at: datetime
    total_items: int
    
    class Config:
        from_attributes = True


class ApplyCouponRequest(BaseModel):
    """Schema for applying a coupon."""
    coupon_code: str
    
    class Config:
        json_schema_extra = {
            "example": {
                "coupon_code": "rahma"
            }
        }


class CouponResponse(BaseModel):
    """Schema for coupon response."""
    coupon_code: str
    discount: int
