# marketplace/modules/products/__init__.py
"""
Products Module - Public catalogue

- Proximity search ("near me") with optional category
- Active product listing and detail
"""

from .router import router
from .service import ProductService

__all__ = [
    "router",
    "ProductService"
]
