from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class PurchaseOption(str, Enum):
    """How a line item is acquired."""
    BUY = "buy"
    RENT = "rent"


class CartItem(BaseModel):
    """Line item in a shopping cart."""
    product_id: str
    quantity: int
    purchase_option: PurchaseOption = PurchaseOption.BUY
    start_date: Optional[datetime] = None  # Rentals only
    end_date: Optional[datetime] = None  # Rentals only
    customization: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        use_enum_values = True
        validate_default = True


class Cart(BaseModel):
    """Shopping cart model for MongoDB, one per user."""
    id: Optional[str] = Field(None, alias="_id")
    user_email: str
    items: List[CartItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    version: int = 0  # Bumped on every write
    
    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "user_email": "a@x.com",
                "items": [
                    {
                        "product_id": "p1",
                        "quantity": 2,
                        "purchase_option": "buy",
                        "customization": {"color": "red"}
                    }
                ],
                "created_at": "2024-01-01T00:00:00",
                "version": 1
            }
        }
    
    @classmethod
    def from_document(cls, document: dict) -> "Cart":
        """Build a Cart from a raw MongoDB document."""
        data = dict(document)
        if "_id" in data:
            data["_id"] = str(data["_id"])
        return cls.model_validate(data)
    
    def to_document(self) -> dict:
        """Serialize to a MongoDB document (without _id)."""
        return self.model_dump(mode="python", exclude={"id"})
