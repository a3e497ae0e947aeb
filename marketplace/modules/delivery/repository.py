# marketplace/modules/delivery/repository.py
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import desc
from typing import List, Optional
from datetime import datetime

from marketplace.shared.database.models import Order, OrderStatus, User
import logging

logger = logging.getLogger(__name__)

class DeliveryRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_order(self, order_id: int) -> Optional[Order]:
        return self.db.query(Order).options(
            selectinload(Order.items)
        ).filter(Order.id == order_id).first()

    def get_available_orders(self) -> List[Order]:
        """Processing orders nobody has accepted yet, oldest first"""
        return self.db.query(Order).options(
            selectinload(Order.items)
        ).filter(
            Order.status == OrderStatus.PROCESSING.value,
            Order.delivery_partner_id.is_(None)
        ).order_by(Order.created_at.asc(), Order.id.asc()).all()

    def get_assigned_orders(self, partner_id: int) -> List[Order]:
        return self.db.query(Order).options(
            selectinload(Order.items)
        ).filter(
            Order.delivery_partner_id == partner_id
        ).order_by(desc(Order.delivery_started_at), desc(Order.id)).all()

    def accept_order(self, order_id: int, partner_id: int, accepted_at: datetime) -> bool:
        """
        Bind the partner with a single conditional UPDATE.

        The WHERE clause carries the whole precondition (processing, no
        partner), so among concurrent callers only one sees a matched row.
        """
        try:
            updated = self.db.query(Order).filter(
                Order.id == order_id,
                Order.status == OrderStatus.PROCESSING.value,
                Order.delivery_partner_id.is_(None)
            ).update(
                {
                    Order.status: OrderStatus.OUT_FOR_DELIVERY.value,
                    Order.delivery_partner_id: partner_id,
                    Order.delivery_started_at: accepted_at
                },
                synchronize_session=False
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return updated == 1

    def deliver_order(self, order_id: int, partner_id: int, delivered_at: datetime) -> bool:
        """Mark delivered only if still out for delivery with this partner"""
        try:
            updated = self.db.query(Order).filter(
                Order.id == order_id,
                Order.delivery_partner_id == partner_id,
                Order.status == OrderStatus.OUT_FOR_DELIVERY.value
            ).update(
                {
                    Order.status: OrderStatus.DELIVERED.value,
                    Order.delivered_at: delivered_at
                },
                synchronize_session=False
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        return updated == 1

    def update_current_location(self, partner_id: int, latitude: float, longitude: float, formatted_address: str) -> None:
        self.db.query(User).filter(User.id == partner_id).update(
            {
                User.current_latitude: latitude,
                User.current_longitude: longitude,
                User.current_formatted_address: formatted_address
            },
            synchronize_session=False
        )
        self.db.commit()
