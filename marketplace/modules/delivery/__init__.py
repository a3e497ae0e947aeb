# marketplace/modules/delivery/__init__.py
"""
Delivery Module - Delivery partner operations

This module implements the delivery partner flow:
- List assignable orders (optionally by proximity)
- Accept an order (exclusive binding, conditional write)
- Mark an order as delivered (bound partner only)
- Delivery statistics
- Current location updates

Architecture:
- router.py: Delivery partner endpoints
- service.py: Transition rules and error mapping
- repository.py: Conditional writes on orders
- statistics.py: Read-only rollups
- schemas.py: Response models
"""

from .router import router
from .service import DeliveryService
from .repository import DeliveryRepository
from .statistics import DeliveryStatisticsAggregator

__all__ = [
    "router",
    "DeliveryService",
    "DeliveryRepository",
    "DeliveryStatisticsAggregator"
]
