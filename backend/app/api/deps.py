"""FastAPI dependencies: DB session and the shopper identity.

No authentication. The shopper is whoever the X-User-Id header names,
falling back to settings.DEFAULT_USER_ID.
"""
from typing import Generator, Optional

from fastapi import Header, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Explicit identity for cart and order operations."""
    if x_user_id is None:
        return settings.DEFAULT_USER_ID

    user_id = x_user_id.strip()
    if not user_id or len(user_id) > 64:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid X-User-Id header")
    return user_id
