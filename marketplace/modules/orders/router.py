# marketplace/modules/orders/router.py
from typing import List
from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from marketplace.config.database import get_db
from marketplace.core.auth.dependencies import get_current_user, get_customer_user
from marketplace.shared.schemas.orders import OrderResponse
from .service import OrderService
from .schemas import OrderCreate

router = APIRouter()

@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    payload: OrderCreate,
    current_user = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """
    Place an order

    **Rules:**
    - Each line item is bound to the vendor that owns the product
    - An unknown product rejects the whole order (nothing is saved)
    - `status` may be `pending` (default) or `processing`
    """
    service = OrderService(db)
    return await service.create_order(current_user.id, payload)

@router.get("/myorders", response_model=List[OrderResponse])
async def get_my_orders(
    current_user = Depends(get_customer_user),
    db: Session = Depends(get_db)
):
    """Orders placed by the current customer, newest first"""
    service = OrderService(db)
    return await service.get_my_orders(current_user.id)

@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int = Path(..., description="Order ID"),
    current_user = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Order detail

    Visible to the customer who placed it, the bound delivery partner,
    vendors with a line item in it, and admins.
    """
    service = OrderService(db)
    return await service.get_order(order_id, current_user)
