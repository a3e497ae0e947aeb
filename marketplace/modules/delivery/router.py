# marketplace/modules/delivery/router.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from marketplace.config.database import get_db
from marketplace.core.auth.dependencies import get_delivery_user
from marketplace.shared.schemas.common import GeoPoint
from marketplace.shared.schemas.orders import OrderResponse
from marketplace.shared.services.geocoding_service import GeocodingClient, get_geocoding_client
from .service import DeliveryService
from .schemas import DeliveryStatisticsResponse, CurrentLocationResponse

router = APIRouter()

@router.get("/orders/available", response_model=List[OrderResponse])
async def get_available_orders(
    lat: Optional[str] = Query(None, description="Partner latitude"),
    lng: Optional[str] = Query(None, description="Partner longitude"),
    radius_km: Optional[str] = Query(None, description="Search radius in km (default 10)"),
    current_user = Depends(get_delivery_user),
    db: Session = Depends(get_db)
):
    """
    Orders ready to be picked up

    **Includes:**
    - Orders in `processing` with no delivery partner yet
    - With `lat`/`lng`: only orders whose shipping point is within `radius_km`, nearest first
    - Without coordinates: every assignable order, oldest first
    """
    service = DeliveryService(db)
    return await service.get_available_orders(lat, lng, radius_km)

@router.get("/orders", response_model=List[OrderResponse])
async def get_assigned_orders(
    current_user = Depends(get_delivery_user),
    db: Session = Depends(get_db)
):
    """Orders bound to the current delivery partner"""
    service = DeliveryService(db)
    return await service.get_assigned_orders(current_user.id)

@router.put("/orders/{order_id}/accept", response_model=OrderResponse)
async def accept_order(
    order_id: int = Path(..., description="Order ID"),
    current_user = Depends(get_delivery_user),
    db: Session = Depends(get_db)
):
    """
    Accept an order for delivery

    **Functionality:**
    - Binds the order to the current partner
    - Status moves to `out_for_delivery` and the delivery clock starts

    **Concurrency:**
    - Only one partner can accept each order
    - The losing request gets 409
    """
    service = DeliveryService(db)
    return await service.accept_order(order_id, current_user.id)

@router.put("/orders/{order_id}/deliver", response_model=OrderResponse)
async def deliver_order(
    order_id: int = Path(..., description="Order ID"),
    current_user = Depends(get_delivery_user),
    db: Session = Depends(get_db)
):
    """
    Mark an order as delivered

    **Validations:**
    - Only the bound partner can deliver (401 otherwise)
    - Order must be `out_for_delivery` (409 otherwise)
    """
    service = DeliveryService(db)
    return await service.deliver_order(order_id, current_user.id)

@router.get("/statistics", response_model=DeliveryStatisticsResponse)
async def get_delivery_statistics(
    current_user = Depends(get_delivery_user),
    db: Session = Depends(get_db)
):
    """
    Delivery statistics

    **Includes:**
    - Assigned, completed and in-progress counts
    - Average delivery time in minutes
    - Five most recently updated orders
    """
    service = DeliveryService(db)
    return await service.get_statistics(current_user.id)

@router.put("/location", response_model=CurrentLocationResponse)
async def update_current_location(
    point: GeoPoint,
    current_user = Depends(get_delivery_user),
    db: Session = Depends(get_db),
    geocoder: GeocodingClient = Depends(get_geocoding_client)
):
    """Update the partner's current position"""
    service = DeliveryService(db)
    return await service.update_current_location(current_user.id, point, geocoder)
