# marketplace/modules/orders/service.py
from typing import List
from sqlalchemy.orm import Session

from marketplace.core.exceptions import NotFoundError, UnauthorizedError, ValidationError
from marketplace.shared.database.models import Order, OrderItem, OrderStatus, User, UserRole
from marketplace.shared.schemas.orders import OrderResponse
from .repository import OrderRepository
from .schemas import OrderCreate
import logging

logger = logging.getLogger(__name__)

# Statuses a customer may choose when placing an order
CREATION_STATUSES = (OrderStatus.PENDING.value, OrderStatus.PROCESSING.value)

class OrderService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = OrderRepository(db)

    async def create_order(self, customer_id: int, payload: OrderCreate) -> OrderResponse:
        """
        Create an order; every line item must resolve to a vendor.

        Products are resolved before anything is written, so a single unknown
        product rejects the whole order.
        """
        if not payload.order_items:
            raise ValidationError("No order items")

        status = (payload.status or OrderStatus.PENDING.value).strip().lower()
        if status not in CREATION_STATUSES:
            raise ValidationError(f"status must be one of: {', '.join(CREATION_STATUSES)}")

        products = self.repository.get_products_by_ids(item.product_id for item in payload.order_items)

        items = []
        for item in payload.order_items:
            product = products.get(item.product_id)
            if product is None:
                logger.warning(f"Order rejected, unknown product {item.product_id}")
                raise NotFoundError(f"Product not found: {item.product_id}")

            items.append(OrderItem(
                product_id=product.id,
                vendor_id=product.vendor_id,
                name=product.name,
                qty=item.qty,
                price=item.price if item.price is not None else product.price
            ))

        shipping = payload.shipping_address
        order = Order(
            customer_id=customer_id,
            items=items,
            shipping_address=shipping.address,
            shipping_city=shipping.city,
            shipping_postal_code=shipping.postal_code,
            shipping_country=shipping.country,
            shipping_latitude=shipping.latitude,
            shipping_longitude=shipping.longitude,
            payment_method=payload.payment_method,
            items_price=payload.items_price,
            tax_price=payload.tax_price,
            shipping_price=payload.shipping_price,
            total_price=payload.total_price,
            is_paid=payload.is_paid,
            status=status
        )

        order = self.repository.create_order(order)
        logger.info(f"Order {order.id} created by customer {customer_id} with status {status}")

        return OrderResponse.from_order(order)

    async def get_order(self, order_id: int, current_user: User) -> OrderResponse:
        order = self.repository.get_order(order_id)
        if order is None:
            raise NotFoundError("Order not found")

        involved = (
            current_user.role == UserRole.ADMIN.value
            or order.customer_id == current_user.id
            or order.delivery_partner_id == current_user.id
            or current_user.id in order.vendor_ids
        )
        if not involved:
            raise UnauthorizedError()

        return OrderResponse.from_order(order)

    async def get_my_orders(self, customer_id: int) -> List[OrderResponse]:
        return [OrderResponse.from_order(order) for order in self.repository.get_orders_for_customer(customer_id)]
