from pydantic import BaseModel, Field
from typing import Optional


class MedicineBase(BaseModel):
    name: str = Field(..., min_length=1)
    generic_name: str = ""
    brand: str = ""
    category: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    stock: int = Field(0, ge=0)
    requires_prescription: bool = False
    description: Optional[str] = None
    dosage: Optional[str] = None
    manufacturer: Optional[str] = None
    image_url: Optional[str] = None


class MedicineCreate(MedicineBase):
    pass


class MedicineUpdate(BaseModel):
    """Shallow patch. Only fields the client sent are applied."""
    name: Optional[str] = None
    generic_name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    stock: Optional[int] = Field(None, ge=0)
    requires_prescription: Optional[bool] = None
    description: Optional[str] = None
    dosage: Optional[str] = None
    manufacturer: Optional[str] = None
    image_url: Optional[str] = None


class StockUpdate(BaseModel):
    stock: int


class MedicineResponse(MedicineBase):
    id: int

    class Config:
        from_attributes = True


class InventoryRecord(MedicineResponse):
    stock_status: str  # In Stock | Low Stock | Out of Stock
