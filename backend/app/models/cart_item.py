from sqlalchemy import Column, Integer, String, Numeric, Boolean, UniqueConstraint
from app.db.base import Base


class CartItem(Base):
    """
    One line of a shopper's cart.

    name, price and requires_prescription are snapshots taken when the line was
    first added; they are not linked to the live catalog row.
    """
    __tablename__ = "cart_items"
    __table_args__ = (
        UniqueConstraint("user_id", "medicine_id", name="uq_cart_user_medicine"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=False, index=True)
    medicine_id = Column(String(32), nullable=False)  # str(Medicine.id)
    name = Column(String(255), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    requires_prescription = Column(Boolean, nullable=False, default=False)

    def __repr__(self):
        return f"<CartItem user={self.user_id} medicine={self.medicine_id} qty={self.quantity}>"
