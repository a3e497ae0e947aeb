# marketplace/modules/products/router.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.orm import Session

from marketplace.config.database import get_db
from .service import ProductService
from .schemas import ProductResponse, NearbyProductResponse

router = APIRouter()

@router.get("/nearby", response_model=List[NearbyProductResponse])
async def get_nearby_products(
    lat: Optional[str] = Query(None, description="Latitude of the search point"),
    lng: Optional[str] = Query(None, description="Longitude of the search point"),
    radius_km: Optional[str] = Query(None, description="Search radius in km (default 10)"),
    category: Optional[str] = Query(None, description="Case-insensitive category filter"),
    db: Session = Depends(get_db)
):
    """
    Products near a point

    **Rules:**
    - `lat` and `lng` are required (400 otherwise)
    - A product exactly on the radius is included
    - Results are sorted by distance; no match returns an empty list
    """
    service = ProductService(db)
    return await service.find_nearby(lat, lng, radius_km, category)

@router.get("", response_model=List[ProductResponse])
async def get_products(
    category: Optional[str] = Query(None, description="Case-insensitive category filter"),
    db: Session = Depends(get_db)
):
    """Active products, newest first"""
    service = ProductService(db)
    return await service.get_products(category)

@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int = Path(..., description="Product ID"),
    db: Session = Depends(get_db)
):
    service = ProductService(db)
    return await service.get_product(product_id)
