"""Cart store: quantity merge, absolute updates, totals, per-user isolation, change notifications."""
from decimal import Decimal

import pytest

from app.core.events import cart_events
from app.core.exceptions import NotFound, ValidationFailure
from app.schemas.medicine import MedicineUpdate
from app.services import cart_service, catalog_service
from conftest import USER, OTHER_USER


def test_repeated_add_merges_quantity(db, catalog):
    mid = str(catalog["aspirin"].id)
    cart_service.add_item(db, USER, mid, 2)
    items = cart_service.add_item(db, USER, mid, 3)

    assert len(items) == 1
    assert items[0].medicine_id == mid
    assert items[0].quantity == 5


def test_add_snapshots_catalog_fields(db, catalog):
    items = cart_service.add_item(db, USER, str(catalog["amoxicillin"].id))
    line = items[0]
    assert line.name == "Amoxicillin 500mg"
    assert line.price == 95
    assert line.requires_prescription is True


def test_snapshot_survives_catalog_price_change(db, catalog):
    mid = catalog["aspirin"].id
    cart_service.add_item(db, USER, str(mid), 1)
    catalog_service.update(db, mid, MedicineUpdate(price=99))

    assert cart_service.get_items(db, USER)[0].price == 10


def test_add_rejects_bad_quantity_and_unknown_medicine(db, catalog):
    with pytest.raises(ValidationFailure):
        cart_service.add_item(db, USER, str(catalog["aspirin"].id), 0)
    with pytest.raises(NotFound):
        cart_service.add_item(db, USER, "999", 1)
    with pytest.raises(NotFound):
        cart_service.add_item(db, USER, "abc", 1)
    assert cart_service.get_items(db, USER) == []


def test_update_quantity_is_absolute(db, catalog):
    mid = str(catalog["aspirin"].id)
    cart_service.add_item(db, USER, mid, 4)
    items = cart_service.update_quantity(db, USER, mid, 2)
    assert items[0].quantity == 2


@pytest.mark.parametrize("quantity", [0, -3])
def test_update_quantity_to_zero_or_less_removes(db, catalog, quantity):
    mid = str(catalog["aspirin"].id)
    cart_service.add_item(db, USER, mid, 4)
    assert cart_service.update_quantity(db, USER, mid, quantity) == []


def test_update_and_remove_unknown_are_noops(db, catalog):
    cart_service.add_item(db, USER, str(catalog["aspirin"].id), 1)
    assert len(cart_service.update_quantity(db, USER, "999", 5)) == 1
    assert len(cart_service.remove_item(db, USER, "999")) == 1


def test_total_follows_updates_and_removals(db, catalog):
    aspirin = str(catalog["aspirin"].id)
    cetirizine = str(catalog["cetirizine"].id)
    cart_service.add_item(db, USER, aspirin, 2)       # 20
    cart_service.add_item(db, USER, cetirizine, 2)    # 37
    assert cart_service.get_total(db, USER) == Decimal("57.00")

    cart_service.update_quantity(db, USER, aspirin, 1)
    assert cart_service.get_total(db, USER) == Decimal("47.00")

    cart_service.remove_item(db, USER, cetirizine)
    assert cart_service.get_total(db, USER) == Decimal("10.00")

    cart_service.clear(db, USER)
    assert cart_service.get_total(db, USER) == 0


def test_carts_are_per_user(db, catalog):
    cart_service.add_item(db, USER, str(catalog["aspirin"].id), 1)
    cart_service.add_item(db, OTHER_USER, str(catalog["cetirizine"].id), 3)

    assert [i.name for i in cart_service.get_items(db, USER)] == ["Aspirin"]
    assert cart_service.get_count(db, OTHER_USER) == 3

    cart_service.clear(db, OTHER_USER)
    assert len(cart_service.get_items(db, USER)) == 1


def test_every_write_notifies_listeners(db, catalog):
    events = []
    cart_events.subscribe(events.append)
    mid = str(catalog["aspirin"].id)

    cart_service.add_item(db, USER, mid, 2)
    cart_service.update_quantity(db, USER, mid, 5)
    cart_service.remove_item(db, USER, mid)
    cart_service.clear(db, USER)

    assert [e.action for e in events] == ["add", "update", "remove", "clear"]
    assert events[0].count == 2
    assert events[1].count == 5
    assert events[-1].items == []
    assert all(e.user_id == USER for e in events)


def test_failing_listener_does_not_break_cart(db, catalog):
    def broken(event):
        raise RuntimeError("badge crashed")

    seen = []
    cart_events.subscribe(broken)
    cart_events.subscribe(seen.append)

    items = cart_service.add_item(db, USER, str(catalog["aspirin"].id), 1)
    assert len(items) == 1
    assert len(seen) == 1


def test_failed_add_does_not_notify(db, catalog):
    events = []
    cart_events.subscribe(events.append)
    with pytest.raises(NotFound):
        cart_service.add_item(db, USER, "999", 1)
    assert events == []


def test_zero_padded_id_names_the_same_line(db, catalog):
    mid = catalog["aspirin"].id
    cart_service.add_item(db, USER, str(mid))
    items = cart_service.add_item(db, USER, f"0{mid}")

    assert len(items) == 1
    assert items[0].medicine_id == str(mid)
    assert items[0].quantity == 2

    items = cart_service.update_quantity(db, USER, f"00{mid}", 7)
    assert [(i.medicine_id, i.quantity) for i in items] == [(str(mid), 7)]
    assert cart_service.remove_item(db, USER, f"0{mid}") == []


def test_concurrent_adds_lose_no_updates(tmp_path):
    import threading

    from sqlalchemy.orm import sessionmaker

    from app.db.base import Base
    from app.db.session import build_engine
    from app.schemas.medicine import MedicineCreate

    engine = build_engine(f"sqlite:///{tmp_path / 'cart.db'}")
    Base.metadata.create_all(engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    setup = factory()
    mid = str(catalog_service.create(setup, MedicineCreate(
        name="Paracetamol", category="Pain Relief", price=4, stock=100,
    )).id)
    setup.close()

    threads, adds, errors = 8, 5, []

    def shopper():
        session = factory()
        try:
            for _ in range(adds):
                cart_service.add_item(session, USER, mid, 1)
        except Exception as e:
            errors.append(e)
        finally:
            session.close()

    workers = [threading.Thread(target=shopper) for _ in range(threads)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()

    check = factory()
    try:
        assert errors == []
        assert cart_service.get_count(check, USER) == threads * adds
        assert len(cart_service.get_items(check, USER)) == 1
    finally:
        check.close()
        engine.dispose()
