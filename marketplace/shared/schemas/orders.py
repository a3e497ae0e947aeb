# marketplace/shared/schemas/orders.py
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class ShippingAddress(BaseModel):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    postal_code: Optional[str] = None
    country: str = Field(..., min_length=1)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)


class OrderItemResponse(BaseModel):
    id: int
    product_id: int
    vendor_id: int
    name: str
    qty: int
    price: float

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    customer_id: int
    status: str
    delivery_partner_id: Optional[int] = None
    items: List[OrderItemResponse]
    shipping_address: ShippingAddress
    payment_method: Optional[str] = None
    items_price: float = 0
    tax_price: float = 0
    shipping_price: float = 0
    total_price: float = 0
    is_paid: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    delivery_started_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    distance_km: Optional[float] = None

    @classmethod
    def from_order(cls, order, distance_km: Optional[float] = None) -> "OrderResponse":
        return cls(
            id=order.id,
            customer_id=order.customer_id,
            status=order.status,
            delivery_partner_id=order.delivery_partner_id,
            items=[OrderItemResponse.model_validate(item) for item in order.items],
            shipping_address=ShippingAddress(
                address=order.shipping_address,
                city=order.shipping_city,
                postal_code=order.shipping_postal_code,
                country=order.shipping_country,
                latitude=order.shipping_latitude,
                longitude=order.shipping_longitude
            ),
            payment_method=order.payment_method,
            items_price=order.items_price or 0,
            tax_price=order.tax_price or 0,
            shipping_price=order.shipping_price or 0,
            total_price=order.total_price or 0,
            is_paid=bool(order.is_paid),
            created_at=order.created_at,
            updated_at=order.updated_at,
            delivery_started_at=order.delivery_started_at,
            delivered_at=order.delivered_at,
            distance_km=round(distance_km, 3) if distance_km is not None else None
        )
