"""Order workflow: creation, frozen fields, queries and the status lifecycle."""
from decimal import Decimal

import pytest

from app.core.exceptions import IllegalTransition, NotFound, ValidationFailure
from app.models.order import OrderStatus
from app.schemas.order import DeliveryAddress, OrderCreate, OrderItem
from app.services import order_service
from conftest import USER, OTHER_USER

ADDRESS = DeliveryAddress(street="1 Park St", city="Kolkata", state="West Bengal", pincode="700016")


def _order(db, user_id=USER, requires_prescription=False, quantity=2, price=10):
    return order_service.create(db, OrderCreate(
        user_id=user_id,
        items=[OrderItem(medicine_id="5", name="Aspirin", quantity=quantity, price=price)],
        total_amount=Decimal(str(quantity * price)),
        delivery_address=ADDRESS,
        prescription_url="/prescriptions/rx.jpg" if requires_prescription else None,
        requires_prescription=requires_prescription,
    ))


def test_create_starts_placed_with_frozen_snapshot(db):
    order = _order(db)
    assert order.status == OrderStatus.PLACED
    assert order.total_amount == 20
    assert order.items[0].medicine_id == "5"
    assert order.created_at is not None


def test_create_rejects_empty_items(db):
    with pytest.raises(ValidationFailure):
        order_service.create(db, OrderCreate(
            user_id=USER, items=[], total_amount=Decimal("0"), delivery_address=ADDRESS,
        ))


def test_ids_are_monotonic(db):
    first, second = _order(db), _order(db)
    order_service.delete(db, second.id)
    assert _order(db).id == second.id + 1
    assert first.id < second.id


def test_pending_orders_in_insertion_order(db):
    a = _order(db)
    b = _order(db, requires_prescription=True)
    c = _order(db)
    d = _order(db, requires_prescription=True)

    order_service.update_status(db, b.id, "pending_verification")
    order_service.update_status(db, c.id, "verified")
    order_service.update_status(db, d.id, "pending_verification")
    order_service.update_status(db, d.id, "verified")

    pending = order_service.get_pending_orders(db)
    assert [o.id for o in pending] == [a.id, b.id]
    assert [o.status for o in pending] == ["placed", "pending_verification"]


def test_get_by_user_and_counts(db):
    mine = _order(db)
    _order(db, user_id=OTHER_USER)
    order_service.update_status(db, mine.id, "verified")
    _order(db)

    assert len(order_service.get_by_user(db, USER)) == 2
    counts = order_service.status_counts(db, USER)
    assert counts["all"] == 2
    assert counts["placed"] == 1
    assert counts["verified"] == 1
    assert counts["delivered"] == 0


def test_group_by_status_has_every_state(db):
    _order(db)
    groups = order_service.group_by_status(db)
    assert set(groups) == {s.value for s in OrderStatus}
    assert len(groups["placed"]) == 1


def test_full_lifecycle_for_prescription_order(db):
    order = _order(db, requires_prescription=True)
    for status in ("pending_verification", "verified", "dispatched", "delivered"):
        order = order_service.update_status(db, order.id, status)
        assert order.status == status


def test_otc_order_goes_straight_to_verified(db):
    order = _order(db)
    assert order_service.update_status(db, order.id, OrderStatus.VERIFIED).status == "verified"


@pytest.mark.parametrize("path", [
    ["delivered"],                      # placed -> delivered
    ["dispatched"],                     # placed -> dispatched
    ["verified", "placed"],             # backwards
    ["verified", "verified"],           # same state again
    ["verified", "dispatched", "delivered", "dispatched"],  # out of terminal
])
def test_illegal_transitions_rejected(db, path):
    order = _order(db)
    *legal, illegal = path
    for status in legal:
        order_service.update_status(db, order.id, status)
    with pytest.raises(IllegalTransition):
        order_service.update_status(db, order.id, illegal)


def test_pending_verification_only_for_prescription_orders(db):
    otc = _order(db)
    with pytest.raises(IllegalTransition):
        order_service.update_status(db, otc.id, "pending_verification")

    rx = _order(db, requires_prescription=True)
    with pytest.raises(IllegalTransition):
        order_service.update_status(db, rx.id, "verified")


def test_illegal_transition_leaves_status_unchanged(db):
    order = _order(db)
    with pytest.raises(IllegalTransition):
        order_service.update_status(db, order.id, "delivered")
    assert order_service.get_by_id(db, order.id).status == "placed"


def test_unknown_status_and_missing_order(db):
    order = _order(db)
    with pytest.raises(ValidationFailure):
        order_service.update_status(db, order.id, "lost")
    with pytest.raises(NotFound):
        order_service.update_status(db, 999, "verified")


def test_status_change_keeps_items_and_total(db):
    order = _order(db, quantity=3, price=7)
    updated = order_service.update_status(db, order.id, "verified")
    assert updated.items == order.items
    assert updated.total_amount == 21


def test_update_patches_delivery_address(db):
    order = _order(db)
    new_address = {"street": "9 Marine Dr", "city": "Mumbai", "state": "Maharashtra", "pincode": "400002"}
    updated = order_service.update(db, order.id, {"delivery_address": new_address})
    assert updated.delivery_address.city == "Mumbai"
    assert updated.total_amount == 20


@pytest.mark.parametrize("patch", [
    {"total_amount": 1},
    {"items": []},
    {"user_id": "someone"},
    {"status": "delivered"},
    {"colour": "red"},
    {"delivery_address": {"street": "", "city": "X", "state": "Y", "pincode": "1"}},
])
def test_update_rejects_frozen_and_unknown_fields(db, patch):
    order = _order(db)
    with pytest.raises(ValidationFailure):
        order_service.update(db, order.id, patch)
    assert order_service.get_by_id(db, order.id).total_amount == 20


def test_delete(db):
    order = _order(db)
    assert order_service.delete(db, order.id).id == order.id
    with pytest.raises(NotFound):
        order_service.get_by_id(db, order.id)
    with pytest.raises(NotFound):
        order_service.delete(db, order.id)


def test_prescription_cannot_be_attached_to_otc_order(db):
    order = _order(db)
    with pytest.raises(ValidationFailure):
        order_service.update(db, order.id, {"prescription_url": "/prescriptions/other.jpg"})
    assert order_service.get_by_id(db, order.id).prescription_url is None

    assert order_service.update(db, order.id, {"prescription_url": None}).prescription_url is None


@pytest.mark.parametrize("url", [None, "", "  "])
def test_prescription_cannot_be_removed_from_rx_order(db, url):
    order = _order(db, requires_prescription=True)
    with pytest.raises(ValidationFailure):
        order_service.update(db, order.id, {"prescription_url": url})
    assert order_service.get_by_id(db, order.id).prescription_url == "/prescriptions/rx.jpg"


def test_prescription_can_be_replaced_on_rx_order(db):
    order = _order(db, requires_prescription=True)
    updated = order_service.update(db, order.id, {"prescription_url": "/prescriptions/rescan.pdf"})
    assert updated.prescription_url == "/prescriptions/rescan.pdf"
