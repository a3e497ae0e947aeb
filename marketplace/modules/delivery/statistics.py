# marketplace/modules/delivery/statistics.py
import math
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.orm import Session, selectinload

from marketplace.shared.database.models import Order, OrderStatus, ASSIGNED_STATUSES

RECENT_ORDERS_LIMIT = 5


def average_delivery_minutes(orders: List[Order]) -> int:
    """
    Mean of (delivered_at - delivery_started_at) in minutes, rounded half up.

    Orders missing either timestamp are left out; no samples gives 0.
    """
    durations = [
        (order.delivered_at - order.delivery_started_at).total_seconds() / 60
        for order in orders
        if order.delivery_started_at is not None and order.delivered_at is not None
    ]
    if not durations:
        return 0
    return int(math.floor(sum(durations) / len(durations) + 0.5))


class DeliveryStatisticsAggregator:
    """Read-only rollups of a delivery partner's work"""

    def __init__(self, db: Session):
        self.db = db

    def _count(self, partner_id: int, statuses) -> int:
        return self.db.query(func.count(Order.id)).filter(
            Order.delivery_partner_id == partner_id,
            Order.status.in_(statuses)
        ).scalar() or 0

    def summarize(self, partner_id: int, recent_limit: Optional[int] = None) -> Dict[str, Any]:
        limit = recent_limit or RECENT_ORDERS_LIMIT

        delivered_orders = self.db.query(Order).filter(
            Order.delivery_partner_id == partner_id,
            Order.status == OrderStatus.DELIVERED.value,
            Order.delivery_started_at.isnot(None),
            Order.delivered_at.isnot(None)
        ).all()

        recent_orders = self.db.query(Order).options(
            selectinload(Order.items)
        ).filter(
            Order.delivery_partner_id == partner_id
        ).order_by(desc(Order.updated_at), desc(Order.id)).limit(limit).all()

        return {
            "total_assigned": self._count(partner_id, ASSIGNED_STATUSES),
            "completed": self._count(partner_id, [OrderStatus.DELIVERED.value]),
            "pending": self._count(partner_id, [OrderStatus.OUT_FOR_DELIVERY.value]),
            "avg_delivery_minutes": average_delivery_minutes(delivered_orders),
            "recent_orders": recent_orders
        }
