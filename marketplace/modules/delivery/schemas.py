# marketplace/modules/delivery/schemas.py
from pydantic import BaseModel
from typing import List

from marketplace.shared.schemas.orders import OrderResponse


class DeliveryStatisticsResponse(BaseModel):
    total_assigned: int
    completed: int
    pending: int
    avg_delivery_minutes: int
    recent_orders: List[OrderResponse]


class CurrentLocationResponse(BaseModel):
    latitude: float
    longitude: float
    formatted_address: str
