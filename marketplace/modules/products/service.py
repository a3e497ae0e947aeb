# marketplace/modules/products/service.py
from typing import List, Optional
from sqlalchemy.orm import Session

from marketplace.config.settings import settings
from marketplace.core.exceptions import NotFoundError
from marketplace.shared.services.proximity_index import ProximityIndex
from .repository import ProductRepository
from .schemas import ProductResponse, NearbyProductResponse

class ProductService:
    def __init__(self, db: Session):
        self.db = db
        self.repository = ProductRepository(db)

    async def find_nearby(
        self,
        latitude: Optional[str],
        longitude: Optional[str],
        radius_km: Optional[str] = None,
        category: Optional[str] = None
    ) -> List[NearbyProductResponse]:
        """Active products within the radius, nearest first"""
        radius = radius_km if radius_km not in (None, "") else settings.default_search_radius_km
        matches = ProximityIndex.for_products(self.db).find_near(latitude, longitude, radius, category=category)
        return [NearbyProductResponse.from_match(m.record, m.distance_km) for m in matches]

    async def get_products(self, category: Optional[str] = None) -> List[ProductResponse]:
        return [ProductResponse.model_validate(p) for p in self.repository.get_active_products(category)]

    async def get_product(self, product_id: int) -> ProductResponse:
        product = self.repository.get_product(product_id)
        if product is None:
            raise NotFoundError("Product not found")
        return ProductResponse.model_validate(product)
