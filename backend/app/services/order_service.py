"""
Order workflow: creation from a cart snapshot and the admin status lifecycle.

LIFECYCLE:
    placed ──> pending_verification ──> verified ──> dispatched ──> delivered
       └───────────────────────────────────^
  - pending_verification only for orders that had a prescription-required line
  - placed -> verified directly only for orders with no such line
  - delivered is terminal

Anything outside ALLOWED_TRANSITIONS raises IllegalTransition.

FROZEN FIELDS:
items, total_amount, user_id and created_at are written once by `create` and
never touched again. `update` patches delivery details only.
"""
import logging
import threading
from decimal import Decimal
from typing import Dict, List

from sqlalchemy.orm import Session

from app.core.audit import AuditLog
from app.core.exceptions import IllegalTransition, NotFound, ValidationFailure
from app.db.transaction import atomic
from app.models.order import Order, OrderStatus
from app.schemas.order import OrderCreate, OrderResponse, OrderUpdate

logger = logging.getLogger(__name__)

_order_lock = threading.RLock()

ALLOWED_TRANSITIONS: Dict[OrderStatus, set] = {
    OrderStatus.PLACED: {OrderStatus.PENDING_VERIFICATION, OrderStatus.VERIFIED},
    OrderStatus.PENDING_VERIFICATION: {OrderStatus.VERIFIED},
    OrderStatus.VERIFIED: {OrderStatus.DISPATCHED},
    OrderStatus.DISPATCHED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),
}

PENDING_STATUSES = (OrderStatus.PLACED.value, OrderStatus.PENDING_VERIFICATION.value)

FROZEN_FIELDS = {"id", "items", "total_amount", "user_id", "created_at", "requires_prescription"}
PATCHABLE_FIELDS = {"delivery_address", "prescription_url"}


def _copy(order: Order) -> OrderResponse:
    return OrderResponse.model_validate(order)


def _get_row(db: Session, order_id: int) -> Order:
    order = db.query(Order).filter(Order.id == int(order_id)).first()
    if not order:
        raise NotFound("Order", order_id)
    return order


def check_transition(current: OrderStatus, target: OrderStatus, requires_prescription: bool) -> None:
    """Raise IllegalTransition unless current -> target is a legal single step for this order."""
    if target not in ALLOWED_TRANSITIONS[current]:
        raise IllegalTransition(current.value, target.value)
    if target == OrderStatus.PENDING_VERIFICATION and not requires_prescription:
        raise IllegalTransition(current.value, target.value, "order has no prescription items")
    if current == OrderStatus.PLACED and target == OrderStatus.VERIFIED and requires_prescription:
        raise IllegalTransition(current.value, target.value, "prescription must be verified first")


def list_all(db: Session) -> List[OrderResponse]:
    return [_copy(o) for o in db.query(Order).order_by(Order.id).all()]


def get_by_id(db: Session, order_id: int) -> OrderResponse:
    return _copy(_get_row(db, order_id))


def get_pending_orders(db: Session) -> List[OrderResponse]:
    """Orders awaiting admin review, in insertion order."""
    rows = db.query(Order).filter(Order.status.in_(PENDING_STATUSES)).order_by(Order.id).all()
    return [_copy(o) for o in rows]


def get_by_user(db: Session, user_id: str) -> List[OrderResponse]:
    rows = db.query(Order).filter(Order.user_id == user_id).order_by(Order.id).all()
    return [_copy(o) for o in rows]


def group_by_status(db: Session) -> Dict[str, List[OrderResponse]]:
    groups: Dict[str, List[OrderResponse]] = {status.value: [] for status in OrderStatus}
    for order in list_all(db):
        groups[order.status.value].append(order)
    return groups


def status_counts(db: Session, user_id: str) -> Dict[str, int]:
    """{"all": n, "placed": n, ...} for the shopper's order filter chips."""
    orders = get_by_user(db, user_id)
    counts = {"all": len(orders)}
    for status in OrderStatus:
        counts[status.value] = 0
    for order in orders:
        counts[order.status.value] += 1
    return counts


def build_order(data: OrderCreate) -> Order:
    """Unsaved Order row with items and total frozen from `data`. Status starts at placed."""
    if not data.items:
        raise ValidationFailure("Order must contain at least one item")
    if data.total_amount < 0:
        raise ValidationFailure("Order total cannot be negative")

    return Order(
        user_id=data.user_id,
        items=[item.model_dump() for item in data.items],
        total_amount=Decimal(str(data.total_amount)),
        status=OrderStatus.PLACED.value,
        prescription_url=data.prescription_url or None,
        requires_prescription=data.requires_prescription,
        delivery_address=data.delivery_address.model_dump(),
    )


def create(db: Session, data: OrderCreate) -> OrderResponse:
    """Persist a new order. Stock is not reserved or decremented here."""
    with _order_lock:
        order = build_order(data)
        with atomic(db, "create_order"):
            db.add(order)
        db.refresh(order)

    logger.info(f"Order {order.id} placed for user {order.user_id}")
    return _copy(order)


def update_status(db: Session, order_id: int, new_status: OrderStatus | str) -> OrderResponse:
    try:
        target = OrderStatus(new_status)
    except ValueError:
        raise ValidationFailure(f"Unknown order status '{new_status}'") from None

    with _order_lock:
        with atomic(db, "update_order_status"):
            order = _get_row(db, order_id)
            current = OrderStatus(order.status)
            try:
                check_transition(current, target, bool(order.requires_prescription))
            except IllegalTransition as e:
                AuditLog.log_rejected("status", "order", e.detail, resource_id=order.id)
                raise
            order.status = target.value
        db.refresh(order)

    logger.info(f"Order {order.id}: {current.value} -> {target.value}")
    AuditLog.log_action("status", "order", order.id, changes={"from": current.value, "to": target.value})
    return _copy(order)


def _check_prescription_url(order: Order, changes: dict) -> None:
    url = changes["prescription_url"]
    url = url.strip() if isinstance(url, str) and url.strip() else None
    if url and not order.requires_prescription:
        raise ValidationFailure("Order has no prescription items; a prescription cannot be attached")
    if url is None and order.requires_prescription:
        raise ValidationFailure("Prescription is required for this order")
    changes["prescription_url"] = url


def update(db: Session, order_id: int, patch: OrderUpdate | dict) -> OrderResponse:
    """Patch delivery details. Frozen fields and status are rejected."""
    changes = patch.model_dump(exclude_unset=True) if isinstance(patch, OrderUpdate) else dict(patch)

    frozen = sorted(set(changes) & FROZEN_FIELDS)
    if frozen:
        raise ValidationFailure(f"Order field(s) cannot be changed after placement: {', '.join(frozen)}")
    if "status" in changes:
        raise ValidationFailure("Use the status endpoint to change order status")
    unknown = sorted(set(changes) - PATCHABLE_FIELDS)
    if unknown:
        raise ValidationFailure(f"Unknown order field(s): {', '.join(unknown)}")
    if "delivery_address" in changes and changes["delivery_address"] is None:
        raise ValidationFailure("Delivery address cannot be empty")

    if changes.get("delivery_address") is not None:
        address = changes["delivery_address"]
        if hasattr(address, "model_dump"):
            address = address.model_dump()
        missing = [k for k in ("street", "city", "state", "pincode") if not str(address.get(k, "")).strip()]
        if missing:
            raise ValidationFailure(f"Delivery address is missing: {', '.join(missing)}")
        changes["delivery_address"] = {k: str(address[k]).strip() for k in ("street", "city", "state", "pincode")}

    with _order_lock:
        with atomic(db, "update_order"):
            order = _get_row(db, order_id)
            if "prescription_url" in changes:
                _check_prescription_url(order, changes)
            for key, value in changes.items():
                setattr(order, key, value)
        db.refresh(order)

    AuditLog.log_action("update", "order", order.id, changes=changes)
    return _copy(order)


def delete(db: Session, order_id: int) -> OrderResponse:
    with _order_lock:
        with atomic(db, "delete_order"):
            order = _get_row(db, order_id)
            removed = _copy(order)
            db.delete(order)

    AuditLog.log_action("delete", "order", removed.id, changes={"user_id": removed.user_id})
    return removed


def lock():
    return _order_lock
