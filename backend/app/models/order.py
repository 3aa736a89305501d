"""
Order: frozen snapshot of a checkout, tracked through the delivery lifecycle.

items, total_amount, user_id and created_at never change after creation.
Status flow: placed -> [pending_verification ->] verified -> dispatched -> delivered.
"""
import enum

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Boolean
from sqlalchemy.sql import func
from sqlalchemy.types import JSON
from app.db.base import Base


class OrderStatus(str, enum.Enum):
    PLACED = "placed"
    PENDING_VERIFICATION = "pending_verification"
    VERIFIED = "verified"
    DISPATCHED = "dispatched"
    DELIVERED = "delivered"


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    items = Column(JSON, nullable=False)  # [{medicine_id, name, quantity, price}]
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(32), nullable=False, default=OrderStatus.PLACED.value, index=True)
    prescription_url = Column(String(512), nullable=True)
    requires_prescription = Column(Boolean, nullable=False, default=False)  # any line needed Rx at checkout
    delivery_address = Column(JSON, nullable=False)  # {street, city, state, pincode}
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Order id={self.id} user={self.user_id} status={self.status}>"
