"""
Domain errors for the storefront stores and their HTTP translation.

Services raise StoreError subclasses and never retry. Routes don't catch them:
the handlers registered in `register_exception_handlers` map each one to a
response through BusinessError, so messages stay consistent across endpoints.

Server-side failures get a generic message externally, detailed logging internally.
"""
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for every failure raised by the catalog, cart and order stores."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(StoreError):
    """Lookup, update or delete on a missing id."""

    def __init__(self, resource: str, resource_id):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class ValidationFailure(StoreError):
    """Input rejected: missing address fields, missing prescription, bad quantity..."""


class IllegalTransition(StoreError):
    """Order status change that the lifecycle table does not allow."""

    def __init__(self, current: str, target: str, reason: str = ""):
        message = f"Cannot move order from '{current}' to '{target}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.current = current
        self.target = target


class PersistenceFailure(StoreError):
    """
    Underlying read/write failure.

    transient=True means retrying later may succeed (lock timeout, lost
    connection). The core itself never retries.
    """

    def __init__(self, detail: str, transient: bool = False):
        super().__init__(detail)
        self.transient = transient


class BusinessError:
    """HTTP responses for domain failures."""

    @staticmethod
    def not_found(resource: str = "Resource", reason: str = "") -> HTTPException:
        """404. Owner mismatches use this too, so other users' orders don't leak."""
        if reason:
            logger.warning(f"Not found: {resource} - {reason}")
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found",
        )

    @staticmethod
    def bad_request(detail: str) -> HTTPException:
        """
        400 for input validation errors.

        OK to include specific details here since the caller caused the issue.
        Examples: "Prescription is required for this order", "Quantity must be positive"
        """
        logger.info(f"Bad request: {detail}")
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )

    @staticmethod
    def conflict(detail: str) -> HTTPException:
        """409 for state conflicts, e.g. an illegal order status jump."""
        logger.info(f"Conflict: {detail}")
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
        )

    @staticmethod
    def server_error(original_error: Exception = None, transient: bool = False) -> HTTPException:
        """
        500 (or 503 when the failure is transient) with a generic message.

        Never expose SQL errors or internal paths to the client.
        """
        if original_error:
            logger.error(
                f"Internal server error: {type(original_error).__name__}: {str(original_error)}",
                exc_info=original_error,
            )
        else:
            logger.error("Internal server error occurred")

        if transient:
            return HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Service temporarily unavailable. Please try again later.",
            )
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An internal error occurred. Please try again later.",
        )


def to_http(exc: StoreError) -> HTTPException:
    if isinstance(exc, NotFound):
        return BusinessError.not_found(exc.resource, reason=f"id={exc.resource_id}")
    if isinstance(exc, ValidationFailure):
        return BusinessError.bad_request(exc.detail)
    if isinstance(exc, IllegalTransition):
        return BusinessError.conflict(exc.detail)
    if isinstance(exc, PersistenceFailure):
        return BusinessError.server_error(exc, transient=exc.transient)
    return BusinessError.server_error(exc)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        http_exc = to_http(exc)
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})
