"""
Error Handlers
==============

Maps the domain error taxonomy onto HTTP responses.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ledger_api.application.dto.common_dto import ErrorResponse
from ledger_api.domain.errors import (
    AuthorizationDenied,
    CapacityExhausted,
    DuplicateConstraintViolation,
    EntityInUse,
    InvalidReference,
    InvalidStatusTransition,
    LedgerError,
    NoActiveBorrow,
    NotAnActiveMember,
    NotFound,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

# Checked in order, so subclasses inherit their parent's status
STATUS_BY_ERROR = (
    (NotFound, status.HTTP_404_NOT_FOUND),
    (InvalidReference, status.HTTP_400_BAD_REQUEST),
    (ValidationFailed, status.HTTP_400_BAD_REQUEST),
    (AuthorizationDenied, status.HTTP_403_FORBIDDEN),
    (CapacityExhausted, status.HTTP_409_CONFLICT),
    (DuplicateConstraintViolation, status.HTTP_409_CONFLICT),
    (NoActiveBorrow, status.HTTP_409_CONFLICT),
    (NotAnActiveMember, status.HTTP_409_CONFLICT),
    (InvalidStatusTransition, status.HTTP_409_CONFLICT),
    (EntityInUse, status.HTTP_409_CONFLICT),
)


# OpenAPI documentation of the error body, shared by every router
ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_403_FORBIDDEN: {"model": ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
}

def status_for(error: LedgerError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("Unmapped %s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    else:
        logger.debug("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": exc.message, "error": exc.code},
    )


def register_error_handlers(application: FastAPI) -> None:
    application.add_exception_handler(LedgerError, ledger_error_handler)
