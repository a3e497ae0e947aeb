# marketplace/modules/delivery/service.py
from typing import Callable, List, Optional
from datetime import datetime
from sqlalchemy.orm import Session

from marketplace.config.settings import settings
from marketplace.core.clock import utcnow
from marketplace.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from marketplace.shared.schemas.common import GeoPoint
from marketplace.shared.schemas.orders import OrderResponse
from marketplace.shared.services.geocoding_service import GeocodingClient
from marketplace.shared.services.proximity_index import ProximityIndex
from .repository import DeliveryRepository
from .statistics import DeliveryStatisticsAggregator
from .schemas import DeliveryStatisticsResponse, CurrentLocationResponse
import logging

logger = logging.getLogger(__name__)

class DeliveryService:
    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.db = db
        self.clock = clock
        self.repository = DeliveryRepository(db)

    async def get_available_orders(
        self,
        latitude: Optional[str] = None,
        longitude: Optional[str] = None,
        radius_km: Optional[str] = None
    ) -> List[OrderResponse]:
        """
        Orders waiting for a delivery partner.

        Without coordinates this is the flat listing; with coordinates only
        orders whose shipping point is within the radius are returned,
        nearest first.
        """
        if latitude is None and longitude is None:
            orders = self.repository.get_available_orders()
            return [OrderResponse.from_order(order) for order in orders]

        radius = radius_km if radius_km not in (None, "") else settings.default_search_radius_km
        matches = ProximityIndex.for_unassigned_orders(self.db).find_near(latitude, longitude, radius)
        return [OrderResponse.from_order(m.record, distance_km=m.distance_km) for m in matches]

    async def get_assigned_orders(self, partner_id: int) -> List[OrderResponse]:
        return [OrderResponse.from_order(order) for order in self.repository.get_assigned_orders(partner_id)]

    async def accept_order(self, order_id: int, partner_id: int) -> OrderResponse:
        """Bind the order to the partner; exactly one concurrent caller wins"""

        accepted = self.repository.accept_order(order_id, partner_id, self.clock())

        order = self.repository.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")

        if not accepted:
            logger.info(f"Accept rejected for order {order_id} by partner {partner_id} (status {order.status})")
            raise ConflictError("Order cannot be accepted at this time")

        logger.info(f"Order {order_id} accepted by delivery partner {partner_id}")
        return OrderResponse.from_order(order)

    async def deliver_order(self, order_id: int, partner_id: int) -> OrderResponse:
        order = self.repository.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")

        if order.delivery_partner_id != partner_id:
            raise UnauthorizedError("Not authorized to update this order")

        delivered_at = self.clock()
        if order.delivery_started_at is not None and delivered_at < order.delivery_started_at:
            delivered_at = order.delivery_started_at

        if not self.repository.deliver_order(order_id, partner_id, delivered_at):
            raise ConflictError("Order cannot be marked as delivered")

        logger.info(f"Order {order_id} delivered by partner {partner_id}")
        return OrderResponse.from_order(self.repository.get_order(order_id))

    async def get_statistics(self, partner_id: int) -> DeliveryStatisticsResponse:
        summary = DeliveryStatisticsAggregator(self.db).summarize(partner_id)

        return DeliveryStatisticsResponse(
            total_assigned=summary["total_assigned"],
            completed=summary["completed"],
            pending=summary["pending"],
            avg_delivery_minutes=summary["avg_delivery_minutes"],
            recent_orders=[OrderResponse.from_order(order) for order in summary["recent_orders"]]
        )

    async def update_current_location(
        self,
        partner_id: int,
        point: GeoPoint,
        geocoder: GeocodingClient
    ) -> CurrentLocationResponse:
        """Store the partner's position; the address degrades to a placeholder"""
        formatted_address = await geocoder.describe_location(point.latitude, point.longitude)

        self.repository.update_current_location(partner_id, point.latitude, point.longitude, formatted_address)

        return CurrentLocationResponse(
            latitude=point.latitude,
            longitude=point.longitude,
            formatted_address=formatted_address
        )
