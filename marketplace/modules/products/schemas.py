# marketplace/modules/products/schemas.py
from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ProductResponse(BaseModel):
    id: int
    vendor_id: int
    name: str
    brand: Optional[str] = None
    category: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    price: float
    count_in_stock: int
    is_active: bool
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None
    delivery_radius_km: float
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class NearbyProductResponse(ProductResponse):
    distance_km: float

    @classmethod
    def from_match(cls, product, distance_km: float) -> "NearbyProductResponse":
        data = ProductResponse.model_validate(product).model_dump()
        return cls(**data, distance_km=round(distance_km, 3))
