# marketplace/modules/geocode/schemas.py
from pydantic import BaseModel
from typing import Optional


class GeocodeResponse(BaseModel):
    latitude: float
    longitude: float
    formatted_address: str
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class ReverseGeocodeResponse(BaseModel):
    latitude: float
    longitude: float
    formatted_address: str
