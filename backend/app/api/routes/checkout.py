"""Checkout: prescription upload, then order placement from the current cart."""
from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user_id
from app.core.config import settings
from app.schemas.order import CheckoutRequest, OrderResponse, PrescriptionUploadResponse
from app.services import checkout_service, prescription_service

router = APIRouter()


@router.post("/prescription", response_model=PrescriptionUploadResponse, status_code=status.HTTP_201_CREATED)
async def upload_prescription(
    file: UploadFile = File(...),
    user_id: str = Depends(get_current_user_id),
):
    data = await file.read(settings.MAX_UPLOAD_BYTES + 1)
    return prescription_service.save_prescription(user_id, file.filename, data)


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def checkout(
    body: CheckoutRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Place the order and empty the cart. On any error the cart is left as it was."""
    return checkout_service.place_order(db, user_id, body.delivery_address, body.prescription_url)
