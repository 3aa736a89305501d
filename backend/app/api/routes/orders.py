"""Shopper order history."""
from typing import Dict, List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user_id
from app.core.exceptions import NotFound
from app.schemas.order import OrderResponse
from app.services import order_service

router = APIRouter()


@router.get("", response_model=List[OrderResponse])
def my_orders(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return order_service.get_by_user(db, user_id)


@router.get("/counts", response_model=Dict[str, int])
def my_order_counts(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return order_service.status_counts(db, user_id)


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Same 404 for someone else's order as for a missing one."""
    order = order_service.get_by_id(db, order_id)
    if order.user_id != user_id:
        raise NotFound("Order", order_id)
    return order
