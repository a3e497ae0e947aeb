# marketplace/modules/geocode/router.py
from typing import Optional
from fastapi import APIRouter, Depends, Query

from marketplace.core.exceptions import ValidationError
from marketplace.shared.services.geocoding_service import GeocodingClient, get_geocoding_client
from marketplace.shared.services.proximity_index import validate_point
from .schemas import GeocodeResponse, ReverseGeocodeResponse

router = APIRouter()

@router.get("", response_model=GeocodeResponse)
async def geocode_address(
    address: Optional[str] = Query(None, description="Free-form address"),
    geocoder: GeocodingClient = Depends(get_geocoding_client)
):
    """
    Address to coordinates

    **Errors:**
    - 400 without an address
    - 404 when the provider finds nothing
    - 503 when the provider is unavailable
    """
    if not address or not address.strip():
        raise ValidationError("Address is required")

    return GeocodeResponse(**await geocoder.geocode(address.strip()))

@router.get("/reverse", response_model=ReverseGeocodeResponse)
async def reverse_geocode(
    lat: Optional[str] = Query(None, description="Latitude"),
    lng: Optional[str] = Query(None, description="Longitude"),
    geocoder: GeocodingClient = Depends(get_geocoding_client)
):
    """Coordinates to a readable address; "Unknown location" when the provider fails"""
    latitude, longitude = validate_point(lat, lng)

    return ReverseGeocodeResponse(
        latitude=latitude,
        longitude=longitude,
        formatted_address=await geocoder.describe_location(latitude, longitude)
    )
