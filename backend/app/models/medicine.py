from sqlalchemy import Column, Integer, String, Numeric, Boolean, Text
from app.db.base import Base


class Medicine(Base):
    """
    Catalog record.

    requires_prescription: checkout refuses an order containing this medicine
    unless a prescription was uploaded, and the order may enter
    pending_verification.
    """
    __tablename__ = "medicines"
    # AUTOINCREMENT: ids are never reused after a delete
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    generic_name = Column(String(255), nullable=False, default="")
    brand = Column(String(255), nullable=False, default="")
    category = Column(String(128), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)  # ₹ per unit
    stock = Column(Integer, nullable=False, default=0)
    requires_prescription = Column(Boolean, nullable=False, default=False)
    description = Column(Text, nullable=True)
    dosage = Column(String(255), nullable=True)
    manufacturer = Column(String(255), nullable=True)
    image_url = Column(String(512), nullable=True)

    def __repr__(self):
        return f"<Medicine id={self.id} name={self.name} stock={self.stock}>"
