"""Cart endpoints for the cart drawer and medicine cards. Every write returns the full cart."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user_id
from app.schemas.cart import CartItemAdd, CartResponse, QuantityUpdate
from app.services import cart_service

router = APIRouter()


@router.get("", response_model=CartResponse)
def get_cart(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return cart_service.get_cart(db, user_id)


@router.get("/total")
def get_total(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return {"total": float(cart_service.get_total(db, user_id))}


@router.get("/count")
def get_count(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    """Badge number: sum of quantities."""
    return {"count": cart_service.get_count(db, user_id)}


@router.post("/items", response_model=CartResponse)
def add_item(item: CartItemAdd, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    cart_service.add_item(db, user_id, item.medicine_id, item.quantity)
    return cart_service.get_cart(db, user_id)


@router.put("/items/{medicine_id}", response_model=CartResponse)
def update_quantity(
    medicine_id: str,
    body: QuantityUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    cart_service.update_quantity(db, user_id, medicine_id, body.quantity)
    return cart_service.get_cart(db, user_id)


@router.delete("/items/{medicine_id}", response_model=CartResponse)
def remove_item(medicine_id: str, db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    cart_service.remove_item(db, user_id, medicine_id)
    return cart_service.get_cart(db, user_id)


@router.delete("", response_model=CartResponse)
def clear_cart(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    cart_service.clear(db, user_id)
    return cart_service.get_cart(db, user_id)
