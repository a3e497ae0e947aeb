# marketplace/modules/products/repository.py
from sqlalchemy.orm import Session
from sqlalchemy import desc, func
from typing import List, Optional

from marketplace.shared.database.models import Product

class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_active_products(self, category: Optional[str] = None) -> List[Product]:
        query = self.db.query(Product).filter(Product.is_active.is_(True))
        if category:
            query = query.filter(func.lower(Product.category) == category.strip().lower())
        return query.order_by(desc(Product.created_at), desc(Product.id)).all()

    def get_product(self, product_id: int) -> Optional[Product]:
        return self.db.query(Product).filter(Product.id == product_id).first()
