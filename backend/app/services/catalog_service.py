"""Catalog store: medicine lookup, browsing filters and admin CRUD.

Every function returns pydantic copies, never the ORM rows, so callers cannot
mutate store state by accident.
"""
import logging
import threading
from decimal import Decimal
from typing import List

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.audit import AuditLog
from app.core.config import settings
from app.core.exceptions import NotFound, ValidationFailure
from app.db.transaction import atomic
from app.models.medicine import Medicine
from app.schemas.medicine import MedicineCreate, MedicineResponse, MedicineUpdate, InventoryRecord

logger = logging.getLogger(__name__)

# Serializes catalog writes across request threads
_catalog_lock = threading.RLock()

IN_STOCK = "In Stock"
LOW_STOCK = "Low Stock"
OUT_OF_STOCK = "Out of Stock"


def _copy(medicine: Medicine) -> MedicineResponse:
    return MedicineResponse.model_validate(medicine)


def _copies(rows) -> List[MedicineResponse]:
    return [_copy(m) for m in rows]


def _get_row(db: Session, medicine_id: int) -> Medicine:
    medicine = db.query(Medicine).filter(Medicine.id == int(medicine_id)).first()
    if not medicine:
        raise NotFound("Medicine", medicine_id)
    return medicine


def list_all(db: Session) -> List[MedicineResponse]:
    return _copies(db.query(Medicine).order_by(Medicine.id).all())


def get_by_id(db: Session, medicine_id: int) -> MedicineResponse:
    return _copy(_get_row(db, medicine_id))


def search(db: Session, query: str | None) -> List[MedicineResponse]:
    """Case-insensitive substring match on name, generic name or brand. Blank query -> whole catalog."""
    if not query or not query.strip():
        return list_all(db)

    pattern = f"%{query.strip().lower()}%"
    rows = (
        db.query(Medicine)
        .filter(
            or_(
                func.lower(Medicine.name).like(pattern),
                func.lower(Medicine.generic_name).like(pattern),
                func.lower(Medicine.brand).like(pattern),
            )
        )
        .order_by(Medicine.id)
        .all()
    )
    return _copies(rows)


def filter_by_category(db: Session, category: str | None) -> List[MedicineResponse]:
    """Case-insensitive exact category match. Blank category -> whole catalog."""
    if not category or not category.strip():
        return list_all(db)

    rows = (
        db.query(Medicine)
        .filter(func.lower(Medicine.category) == category.strip().lower())
        .order_by(Medicine.id)
        .all()
    )
    return _copies(rows)


def list_featured(db: Session) -> List[MedicineResponse]:
    # Placeholder policy: first N of the catalog, no ranking
    return _copies(db.query(Medicine).order_by(Medicine.id).limit(settings.FEATURED_COUNT).all())


def list_categories(db: Session) -> List[str]:
    """Distinct categories in the order they first appear in the catalog."""
    seen = []
    for (category,) in db.query(Medicine.category).order_by(Medicine.id).all():
        if category not in seen:
            seen.append(category)
    return seen


def stock_status(stock: int, threshold: int | None = None) -> str:
    threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    if stock <= 0:
        return OUT_OF_STOCK
    if stock < threshold:
        return LOW_STOCK
    return IN_STOCK


def list_inventory(db: Session) -> List[InventoryRecord]:
    return [
        InventoryRecord(**_copy(m).model_dump(), stock_status=stock_status(m.stock))
        for m in db.query(Medicine).order_by(Medicine.id).all()
    ]


def list_low_stock(db: Session, threshold: int | None = None) -> List[MedicineResponse]:
    threshold = settings.LOW_STOCK_THRESHOLD if threshold is None else threshold
    rows = (
        db.query(Medicine)
        .filter(Medicine.stock < threshold)
        .order_by(Medicine.stock.asc(), Medicine.id)
        .all()
    )
    return _copies(rows)


def update_stock(db: Session, medicine_id: int, new_stock: int) -> MedicineResponse:
    if new_stock is None or int(new_stock) < 0:
        raise ValidationFailure("Stock cannot be negative")

    with _catalog_lock:
        with atomic(db, "update_stock"):
            medicine = _get_row(db, medicine_id)
            previous = medicine.stock
            medicine.stock = int(new_stock)
        db.refresh(medicine)

    AuditLog.log_action("stock", "medicine", medicine.id, changes={"from": previous, "to": medicine.stock})
    return _copy(medicine)


def create(db: Session, data: MedicineCreate) -> MedicineResponse:
    """Append a medicine. The database assigns a fresh id that is never reused."""
    fields = data.model_dump()
    fields["name"] = fields["name"].strip()
    if not fields["name"]:
        raise ValidationFailure("Medicine name cannot be empty")
    if not str(fields.get("category") or "").strip():
        raise ValidationFailure("Medicine category cannot be empty")
    fields["price"] = Decimal(str(fields["price"]))

    with _catalog_lock:
        medicine = Medicine(**fields)
        with atomic(db, "create_medicine"):
            db.add(medicine)
        db.refresh(medicine)

    logger.info(f"Medicine {medicine.id} created: {medicine.name}")
    AuditLog.log_action("create", "medicine", medicine.id, changes={"name": medicine.name})
    return _copy(medicine)


def update(db: Session, medicine_id: int, patch: MedicineUpdate | dict) -> MedicineResponse:
    """Shallow merge of the supplied fields. The id itself is never patched."""
    changes = patch.model_dump(exclude_unset=True) if isinstance(patch, MedicineUpdate) else dict(patch)
    changes.pop("id", None)

    if "name" in changes and (changes["name"] is None or not changes["name"].strip()):
        raise ValidationFailure("Medicine name cannot be empty")
    if changes.get("price") is not None and changes["price"] < 0:
        raise ValidationFailure("Price cannot be negative")
    if changes.get("stock") is not None and changes["stock"] < 0:
        raise ValidationFailure("Stock cannot be negative")

    columns = set(Medicine.__table__.columns.keys())
    unknown = [key for key in changes if key not in columns]
    if unknown:
        raise ValidationFailure(f"Unknown medicine field(s): {', '.join(sorted(unknown))}")

    required = {column.name for column in Medicine.__table__.columns if not column.nullable}
    cleared = sorted(key for key, value in changes.items() if value is None and key in required)
    if cleared:
        raise ValidationFailure(f"Medicine field(s) cannot be empty: {', '.join(cleared)}")
    if "category" in changes and not str(changes["category"]).strip():
        raise ValidationFailure("Medicine category cannot be empty")

    with _catalog_lock:
        with atomic(db, "update_medicine"):
            medicine = _get_row(db, medicine_id)
            for key, value in changes.items():
                if key == "price" and value is not None:
                    value = Decimal(str(value))
                setattr(medicine, key, value)
        db.refresh(medicine)

    AuditLog.log_action("update", "medicine", medicine.id, changes=changes)
    return _copy(medicine)


def delete(db: Session, medicine_id: int) -> MedicineResponse:
    with _catalog_lock:
        with atomic(db, "delete_medicine"):
            medicine = _get_row(db, medicine_id)
            removed = _copy(medicine)
            db.delete(medicine)

    AuditLog.log_action("delete", "medicine", removed.id, changes={"name": removed.name})
    return removed
