"""Cart store: one cart per shopper, persisted as rows of cart_items.

Read-modify-write on a line (quantity merge) runs under a process-wide lock
and inside one transaction, so two concurrent adds of the same medicine both
land. Listeners on `cart_events` are notified after every committed write.
"""
import logging
import threading
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from app.core.events import CartUpdated, cart_events
from app.core.exceptions import NotFound, ValidationFailure
from app.db.transaction import atomic
from app.models.cart_item import CartItem
from app.schemas.cart import CartItemResponse, CartResponse
from app.services import catalog_service

logger = logging.getLogger(__name__)

_cart_lock = threading.RLock()


def _rows(db: Session, user_id: str) -> List[CartItem]:
    return db.query(CartItem).filter(CartItem.user_id == user_id).order_by(CartItem.id).all()


def _canonical_id(medicine_id) -> str | None:
    """"01" and "1" name the same medicine; lines are keyed by str(Medicine.id)."""
    value = str(medicine_id).strip()
    if not value.isascii() or not value.isdigit():
        return None
    return str(int(value))


def _find(db: Session, user_id: str, medicine_id: str) -> CartItem | None:
    medicine_id = _canonical_id(medicine_id)
    if medicine_id is None:
        return None
    return (
        db.query(CartItem)
        .filter(CartItem.user_id == user_id, CartItem.medicine_id == str(medicine_id))
        .first()
    )


def _notify(db: Session, user_id: str, action: str) -> List[CartItemResponse]:
    items = get_items(db, user_id)
    cart_events.notify(CartUpdated(user_id=user_id, action=action, items=[i.model_dump() for i in items]))
    return items


def get_items(db: Session, user_id: str) -> List[CartItemResponse]:
    return [CartItemResponse.model_validate(row) for row in _rows(db, user_id)]


def add_item(db: Session, user_id: str, medicine_id: str, quantity: int = 1) -> List[CartItemResponse]:
    """
    Add a medicine to the cart.

    Repeated adds of the same medicine accumulate quantity; they never overwrite.
    Name, price and the prescription flag are copied from the catalog on the
    first add only.
    """
    if quantity is None or quantity < 1:
        raise ValidationFailure("Quantity must be at least 1")

    canonical = _canonical_id(medicine_id)
    if canonical is None:
        raise NotFound("Medicine", medicine_id)

    with _cart_lock:
        with atomic(db, "add_to_cart"):
            medicine = catalog_service.get_by_id(db, int(canonical))
            medicine_id = str(medicine.id)
            existing = _find(db, user_id, medicine_id)
            if existing:
                existing.quantity = existing.quantity + quantity
            else:
                db.add(CartItem(
                    user_id=user_id,
                    medicine_id=medicine_id,
                    name=medicine.name,
                    price=Decimal(str(medicine.price)),
                    quantity=quantity,
                    requires_prescription=medicine.requires_prescription,
                ))
        logger.info(f"Cart {user_id}: +{quantity} x medicine {medicine_id}")
        return _notify(db, user_id, "add")


def update_quantity(db: Session, user_id: str, medicine_id: str, quantity: int) -> List[CartItemResponse]:
    """Absolute set. quantity <= 0 removes the line. Unknown medicine is a no-op."""
    with _cart_lock:
        with atomic(db, "update_cart_quantity"):
            item = _find(db, user_id, medicine_id)
            if item is not None:
                if quantity <= 0:
                    db.delete(item)
                else:
                    item.quantity = quantity
        return _notify(db, user_id, "update")


def remove_item(db: Session, user_id: str, medicine_id: str) -> List[CartItemResponse]:
    with _cart_lock:
        with atomic(db, "remove_from_cart"):
            item = _find(db, user_id, medicine_id)
            if item is not None:
                db.delete(item)
        return _notify(db, user_id, "remove")


def clear_rows(db: Session, user_id: str) -> int:
    """Delete every line without committing. Checkout calls this inside its own transaction."""
    return (
        db.query(CartItem)
        .filter(CartItem.user_id == user_id)
        .delete(synchronize_session=False)
    )


def clear(db: Session, user_id: str) -> List[CartItemResponse]:
    with _cart_lock:
        with atomic(db, "clear_cart"):
            clear_rows(db, user_id)
        return _notify(db, user_id, "clear")


def notify_cleared(db: Session, user_id: str) -> None:
    _notify(db, user_id, "clear")


def get_total(db: Session, user_id: str) -> Decimal:
    return sum(
        (Decimal(str(row.price)) * row.quantity for row in _rows(db, user_id)),
        Decimal("0"),
    )


def get_count(db: Session, user_id: str) -> int:
    return sum(row.quantity for row in _rows(db, user_id))


def get_cart(db: Session, user_id: str) -> CartResponse:
    items = get_items(db, user_id)
    return CartResponse(
        items=items,
        total=float(get_total(db, user_id)),
        count=sum(i.quantity for i in items),
        requires_prescription=any(i.requires_prescription for i in items),
    )


def lock():
    """The cart store lock, for callers that need a multi-step cart transaction."""
    return _cart_lock
