# marketplace/modules/orders/__init__.py
"""
Orders Module - Customer side of the order lifecycle

- Create orders (fail-fast vendor resolution per line item)
- List the customer's own orders
- Order detail for the parties involved

Architecture:
- router.py: Customer endpoints
- service.py: Creation rules
- repository.py: Order persistence
- schemas.py: Request models
"""

from .router import router
from .service import OrderService
from .repository import OrderRepository

__all__ = [
    "router",
    "OrderService",
    "OrderRepository"
]
