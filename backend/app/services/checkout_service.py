"""
Checkout: turns a shopper's cart into an order.

PROTOCOL:
1. Read the cart (empty cart -> ValidationFailure)
2. Validate the delivery address (street, city, state, pincode)
3. If any line requires a prescription, a prescription reference is mandatory
4. Create the order from the cart snapshot with the computed total
5. Clear the cart

Steps 4 and 5 commit together. If anything fails the session rolls back:
no order, cart untouched. The cart can't be submitted twice because it is
only emptied in the same commit that creates the order.
"""
import logging

from sqlalchemy.orm import Session

from app.core.audit import AuditLog
from app.core.exceptions import ValidationFailure
from app.db.transaction import atomic
from app.schemas.order import DeliveryAddress, OrderCreate, OrderItem, OrderResponse
from app.services import cart_service, order_service

logger = logging.getLogger(__name__)


def place_order(
    db: Session,
    user_id: str,
    delivery_address: DeliveryAddress,
    prescription_url: str | None = None,
) -> OrderResponse:
    prescription_url = (prescription_url or "").strip() or None

    # Lock order: cart, then orders
    with cart_service.lock(), order_service.lock():
        items = cart_service.get_items(db, user_id)
        if not items:
            raise ValidationFailure("Cart is empty")

        missing = delivery_address.missing_fields()
        if missing:
            raise ValidationFailure(f"Delivery address is missing: {', '.join(missing)}")

        needs_prescription = any(item.requires_prescription for item in items)
        if needs_prescription and not prescription_url:
            AuditLog.log_rejected("checkout", "order", "prescription missing", actor=user_id)
            raise ValidationFailure("Prescription is required for this order")

        data = OrderCreate(
            user_id=user_id,
            items=[
                OrderItem(medicine_id=i.medicine_id, name=i.name, quantity=i.quantity, price=i.price)
                for i in items
            ],
            total_amount=cart_service.get_total(db, user_id),
            delivery_address=DeliveryAddress(
                street=delivery_address.street.strip(),
                city=delivery_address.city.strip(),
                state=delivery_address.state.strip(),
                pincode=delivery_address.pincode.strip(),
            ),
            # Only kept when it is actually needed for verification
            prescription_url=prescription_url if needs_prescription else None,
            requires_prescription=needs_prescription,
        )

        order = order_service.build_order(data)
        with atomic(db, "checkout"):
            db.add(order)
            db.flush()
            cart_service.clear_rows(db, user_id)
        db.refresh(order)

        placed = OrderResponse.model_validate(order)

    logger.info(f"Checkout complete: order {placed.id} for user {user_id}, total {placed.total_amount}")
    AuditLog.log_order_placed(placed.id, user_id, data.total_amount, len(placed.items), needs_prescription)
    cart_service.notify_cleared(db, user_id)
    return placed
