"""Create all tables and seed the catalog. Run on app startup."""
import logging
from decimal import Decimal

from app.core.config import settings
from app.db.base import Base
from app.db.seed_data import MEDICINES
from app.db.session import engine, SessionLocal
from app.models import medicine, cart_item, order  # noqa: F401 - register models
from app.models.medicine import Medicine

logger = logging.getLogger(__name__)


def seed_catalog(db) -> int:
    """Insert the starter catalog if the medicines table is empty. Returns rows added."""
    if db.query(Medicine).count() > 0:
        return 0
    for data in MEDICINES:
        db.add(Medicine(**{**data, "price": Decimal(str(data["price"]))}))
    db.commit()
    logger.info(f"Seeded catalog with {len(MEDICINES)} medicines")
    return len(MEDICINES)


def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)

    if not settings.SEED_CATALOG:
        return

    db = SessionLocal(bind=bind) if bind is not None else SessionLocal()
    try:
        seed_catalog(db)
    finally:
        db.close()
