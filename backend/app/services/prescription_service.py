"""Prescription uploads for checkout.

Files land in settings.UPLOAD_DIR under a random name; the returned URL
(/prescriptions/<name>) is what checkout stores on the order.
"""
import logging
import uuid
from pathlib import Path

from app.core.config import settings
from app.core.exceptions import PersistenceFailure, ValidationFailure
from app.schemas.order import PrescriptionUploadResponse

logger = logging.getLogger(__name__)

URL_PREFIX = "/prescriptions"


def save_prescription(user_id: str, filename: str, data: bytes) -> PrescriptionUploadResponse:
    extension = Path(filename or "").suffix.lower()
    if extension not in settings.ALLOWED_PRESCRIPTION_EXTENSIONS:
        raise ValidationFailure("Prescription must be a JPG, PNG or PDF file")
    if not data:
        raise ValidationFailure("Prescription file is empty")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise ValidationFailure(f"Prescription file exceeds {settings.MAX_UPLOAD_BYTES // (1024 * 1024)} MB")

    upload_dir = Path(settings.UPLOAD_DIR)
    stored_name = f"{uuid.uuid4().hex}{extension}"
    try:
        upload_dir.mkdir(parents=True, exist_ok=True)
        (upload_dir / stored_name).write_bytes(data)
    except OSError as e:
        logger.error(f"Could not store prescription for user {user_id}: {e}")
        raise PersistenceFailure("Could not store prescription", transient=True) from e

    logger.info(f"Prescription stored for user {user_id}: {stored_name} ({len(data)} bytes)")
    return PrescriptionUploadResponse(url=f"{URL_PREFIX}/{stored_name}", filename=filename)
