from pydantic import BaseModel, Field
from typing import List


class CartItemAdd(BaseModel):
    """name/price/prescription flag are copied from the catalog, not trusted from the client."""
    medicine_id: str
    quantity: int = 1


class QuantityUpdate(BaseModel):
    quantity: int  # absolute; <= 0 removes the line


class CartItemResponse(BaseModel):
    medicine_id: str
    name: str
    price: float
    quantity: int
    requires_prescription: bool = False

    class Config:
        from_attributes = True


class CartResponse(BaseModel):
    items: List[CartItemResponse] = Field(default_factory=list)
    total: float = 0.0
    count: int = 0
    requires_prescription: bool = False
