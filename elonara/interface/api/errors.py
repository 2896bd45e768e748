"""Exception handlers rendering the response envelope."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from elonara.domain.error import (
    AlreadyResolvedError,
    BusinessRuleViolationError,
    DomainError,
    InvalidTransitionError,
    NotAuthorizedError,
    NotFoundError,
    ValidationError,
)
from elonara.interface.api.envelope import fail
from elonara.interface.api.security import NonceRejectedError

_STATUS_CODES: dict[type[DomainError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotAuthorizedError: status.HTTP_403_FORBIDDEN,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AlreadyResolvedError: status.HTTP_409_CONFLICT,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    BusinessRuleViolationError: status.HTTP_409_CONFLICT,
}


def status_for(error: DomainError) -> int:
    """HTTP status for a domain error (400 for unmapped subclasses)."""
    for cls in type(error).__mro__:
        if cls in _STATUS_CODES:
            return _STATUS_CODES[cls]
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    code = status_for(exc)
    logfire.info(
        "Domain error",
        error_type=type(exc).__name__,
        status_code=code,
        path=request.url.path,
    )
    return JSONResponse(status_code=code, content=fail(exc.message).model_dump())


async def nonce_rejected_handler(
    request: Request, exc: NonceRejectedError
) -> JSONResponse:
    logfire.warn("Nonce rejected", scope=exc.scope.value, path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN, content=fail(str(exc)).model_dump()
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": ".".join(str(p) for p in e["loc"][1:]), "message": e["msg"]}
        for e in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=fail("Please check the highlighted fields.", {"errors": errors}).model_dump(),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach the envelope-rendering handlers to the app."""
    app.add_exception_handler(DomainError, domain_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(NonceRejectedError, nonce_rejected_handler)  # type: ignore[arg-type]
    app.add_exception_handler(
        RequestValidationError,
        request_validation_handler,  # type: ignore[arg-type]
    )
