"""Admin review queue and inventory management."""
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.medicine import InventoryRecord, MedicineCreate, MedicineResponse, MedicineUpdate, StockUpdate
from app.schemas.order import OrderResponse, OrderUpdate, StatusUpdate
from app.services import catalog_service, order_service

router = APIRouter()


# ==============================================================================
# ORDERS
# ==============================================================================

@router.get("/orders", response_model=List[OrderResponse])
def list_orders(db: Session = Depends(get_db)):
    """All orders, oldest first. Admin 'All Orders' tab."""
    return order_service.list_all(db)


@router.get("/orders/pending", response_model=List[OrderResponse])
def list_pending(db: Session = Depends(get_db)):
    """placed + pending_verification, in the order they came in."""
    return order_service.get_pending_orders(db)


@router.get("/orders/by-status", response_model=Dict[str, List[OrderResponse]])
def orders_by_status(db: Session = Depends(get_db)):
    return order_service.group_by_status(db)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return order_service.get_by_id(db, order_id)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(order_id: int, body: StatusUpdate, db: Session = Depends(get_db)):
    """Single lifecycle step. Illegal jumps answer 409."""
    return order_service.update_status(db, order_id, body.status)


@router.patch("/orders/{order_id}", response_model=OrderResponse)
def update_order(order_id: int, body: OrderUpdate, db: Session = Depends(get_db)):
    return order_service.update(db, order_id, body)


@router.delete("/orders/{order_id}", response_model=OrderResponse)
def delete_order(order_id: int, db: Session = Depends(get_db)):
    return order_service.delete(db, order_id)


# ==============================================================================
# INVENTORY
# ==============================================================================

@router.get("/inventory", response_model=List[InventoryRecord])
def list_inventory(db: Session = Depends(get_db)):
    return catalog_service.list_inventory(db)


@router.get("/inventory/low-stock", response_model=List[MedicineResponse])
def low_stock(
    threshold: Optional[int] = Query(None, description="Defaults to LOW_STOCK_THRESHOLD"),
    db: Session = Depends(get_db),
):
    return catalog_service.list_low_stock(db, threshold)


@router.post("/inventory", response_model=MedicineResponse, status_code=status.HTTP_201_CREATED)
def create_medicine(item: MedicineCreate, db: Session = Depends(get_db)):
    return catalog_service.create(db, item)


@router.patch("/inventory/{medicine_id}", response_model=MedicineResponse)
def update_medicine(medicine_id: int, updates: MedicineUpdate, db: Session = Depends(get_db)):
    return catalog_service.update(db, medicine_id, updates)


@router.patch("/inventory/{medicine_id}/stock", response_model=MedicineResponse)
def update_stock(medicine_id: int, body: StockUpdate, db: Session = Depends(get_db)):
    return catalog_service.update_stock(db, medicine_id, body.stock)


@router.delete("/inventory/{medicine_id}", response_model=MedicineResponse)
def delete_medicine(medicine_id: int, db: Session = Depends(get_db)):
    return catalog_service.delete(db, medicine_id)
