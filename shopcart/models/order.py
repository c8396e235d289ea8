from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from shopcart.models.cart import CartItem


class Order(BaseModel):
    """Order model for MongoDB. Immutable once written."""
    id: Optional[str] = Field(None, alias="_id")
    user_email: str
    cart_id: Optional[str] = None  # Cart the order was converted from
    items: List[CartItem]
    created_at: datetime = Field(default_factory=datetime.utcnow)
    
    class Config:
        populate_by_name = True
        frozen = True
        json_schema_extra = {
            "example": {
                "user_email": "a@x.com",
                "items": [
                    {"product_id": "p1", "quantity": 5, "purchase_option": "buy"}
                ],
                "created_at": "2024-01-01T00:00:00"
            }
        }
    
    @classmethod
    def from_document(cls, document: dict) -> "Order":
        """Build an Order from a raw MongoDB document."""
        data = dict(document)
        if "_id" in data:
            data["_id"] = str(data["_id"])
        return cls.model_validate(data)
