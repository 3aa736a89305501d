"""Catalog browsing for the storefront: home page featured list, medicines page with search and categories."""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_db
from app.schemas.medicine import MedicineResponse
from app.services import catalog_service

router = APIRouter()


@router.get("", response_model=List[MedicineResponse])
def list_medicines(
    q: Optional[str] = Query(None, description="Search name, generic name or brand"),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Search wins over category, like the medicines page. Neither -> whole catalog."""
    if q and q.strip():
        return catalog_service.search(db, q)
    if category and category.strip() and category.strip().lower() != "all":
        return catalog_service.filter_by_category(db, category)
    return catalog_service.list_all(db)


@router.get("/featured", response_model=List[MedicineResponse])
def featured(db: Session = Depends(get_db)):
    return catalog_service.list_featured(db)


@router.get("/categories", response_model=List[str])
def categories(db: Session = Depends(get_db)):
    return catalog_service.list_categories(db)


@router.get("/{medicine_id}", response_model=MedicineResponse)
def get_medicine(medicine_id: int, db: Session = Depends(get_db)):
    return catalog_service.get_by_id(db, medicine_id)
