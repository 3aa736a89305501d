from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

from app.models.order import OrderStatus


class DeliveryAddress(BaseModel):
    # Blank values are rejected by checkout, not here, so the caller gets one clear message
    street: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""

    def missing_fields(self) -> List[str]:
        return [name for name in ("street", "city", "state", "pincode") if not getattr(self, name).strip()]


class OrderItem(BaseModel):
    medicine_id: str
    name: str
    quantity: int
    price: float


class OrderCreate(BaseModel):
    """Input to OrderService.create: a cart snapshot already priced by checkout."""
    user_id: str
    items: List[OrderItem]
    total_amount: Decimal
    delivery_address: DeliveryAddress
    prescription_url: Optional[str] = None
    requires_prescription: bool = False


class OrderUpdate(BaseModel):
    """Admin patch. Unknown keys pass through so the service can reject frozen fields by name."""
    delivery_address: Optional[DeliveryAddress] = None
    prescription_url: Optional[str] = None

    class Config:
        extra = "allow"


class StatusUpdate(BaseModel):
    status: OrderStatus


class CheckoutRequest(BaseModel):
    delivery_address: DeliveryAddress
    prescription_url: Optional[str] = None


class PrescriptionUploadResponse(BaseModel):
    url: str
    filename: str


class OrderResponse(BaseModel):
    id: int
    user_id: str
    items: List[OrderItem]
    status: OrderStatus
    total_amount: float
    prescription_url: Optional[str] = None
    requires_prescription: bool = False
    delivery_address: DeliveryAddress
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
