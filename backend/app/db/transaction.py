"""Commit/rollback wrapper shared by the stores.

Any SQLAlchemy failure inside the block rolls the whole session back and is
re-raised as PersistenceFailure. OperationalError (locked database, lost
connection) is marked transient; everything else is permanent.
"""
import logging
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import PersistenceFailure

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, operation: str):
    try:
        yield
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        transient = isinstance(e, OperationalError)
        logger.error(f"{operation} failed ({'transient' if transient else 'permanent'}): {e}")
        raise PersistenceFailure(f"{operation} failed", transient=transient) from e
    except Exception:
        db.rollback()
        raise
