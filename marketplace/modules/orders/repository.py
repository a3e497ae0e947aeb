# marketplace/modules/orders/repository.py
from sqlalchemy.orm import Session, selectinload
from sqlalchemy import desc
from typing import Dict, Iterable, List, Optional

from marketplace.shared.database.models import Order, Product
import logging

logger = logging.getLogger(__name__)

class OrderRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_products_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        ids = set(product_ids)
        if not ids:
            return {}
        products = self.db.query(Product).filter(Product.id.in_(ids)).all()
        return {product.id: product for product in products}

    def create_order(self, order: Order) -> Order:
        """Persist the order and its items in one transaction"""
        try:
            self.db.add(order)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(order)
        return order

    def get_order(self, order_id: int) -> Optional[Order]:
        return self.db.query(Order).options(
            selectinload(Order.items)
        ).filter(Order.id == order_id).first()

    def get_orders_for_customer(self, customer_id: int) -> List[Order]:
        return self.db.query(Order).options(
            selectinload(Order.items)
        ).filter(
            Order.customer_id == customer_id
        ).order_by(desc(Order.created_at), desc(Order.id)).all()
