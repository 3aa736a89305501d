"""Shared fixtures: a fresh in-memory database per test and a TestClient bound to it."""
import os

# Must be set before app.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SEED_CATALOG", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from sqlalchemy.orm import sessionmaker

from app.core.config import settings
from app.core.events import cart_events
from app.db.base import Base
from app.db.session import build_engine
from app.models import Medicine, CartItem, Order  # noqa: F401 - register models
from app.schemas.medicine import MedicineCreate
from app.services import catalog_service

USER = "user123"
OTHER_USER = "user456"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(autouse=True)
def reset_cart_listeners():
    yield
    cart_events.clear()


@pytest.fixture
def catalog(db):
    """Three medicines: one needs a prescription. Keyed by short name."""
    aspirin = catalog_service.create(db, MedicineCreate(
        name="Aspirin", generic_name="Acetylsalicylic acid", brand="Disprin",
        category="Pain Relief", price=10, stock=50,
    ))
    cetirizine = catalog_service.create(db, MedicineCreate(
        name="Cetirizine 10mg", generic_name="Cetirizine", brand="Okacet",
        category="Allergy", price=18.5, stock=5,
    ))
    amoxicillin = catalog_service.create(db, MedicineCreate(
        name="Amoxicillin 500mg", generic_name="Amoxicillin", brand="Mox",
        category="Antibiotics", price=95, stock=0, requires_prescription=True,
    ))
    return {"aspirin": aspirin, "cetirizine": cetirizine, "amoxicillin": amoxicillin}


@pytest.fixture
def client(session_factory, monkeypatch, tmp_path):
    from fastapi.testclient import TestClient

    from app.api.deps import get_db
    from app.main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path / "prescriptions"))
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def address():
    from app.schemas.order import DeliveryAddress

    return DeliveryAddress(street="12 MG Road", city="Bengaluru", state="Karnataka", pincode="560001")
