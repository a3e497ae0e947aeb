# marketplace/modules/orders/schemas.py
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional

from marketplace.shared.schemas.orders import ShippingAddress


class OrderItemCreate(BaseModel):
    product_id: int = Field(..., description="Product being ordered")
    qty: int = Field(..., gt=0, description="Quantity")
    price: Optional[Decimal] = Field(None, ge=0, description="Unit price; defaults to the product price")


class OrderCreate(BaseModel):
    order_items: List[OrderItemCreate]
    shipping_address: ShippingAddress
    payment_method: Optional[str] = None
    items_price: Decimal = Decimal("0")
    tax_price: Decimal = Decimal("0")
    shipping_price: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")
    is_paid: bool = False
    status: Optional[str] = Field(None, description="pending (default) or processing")

    class Config:
        json_schema_extra = {
            "example": {
                "order_items": [{"product_id": 1, "qty": 2}],
                "shipping_address": {
                    "address": "12 Market Street",
                    "city": "Springfield",
                    "postal_code": "12345",
                    "country": "US",
                    "latitude": 40.7128,
                    "longitude": -74.006
                },
                "payment_method": "cash",
                "status": "processing"
            }
        }
