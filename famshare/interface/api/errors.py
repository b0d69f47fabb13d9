"""Mapping of domain errors to HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from famshare.domain.error import (
    BusinessRuleViolationError,
    CannotShareWithSelfError,
    DomainError,
    InvitationExpiredError,
    InvitationNotFoundError,
    InvitationTargetMismatchError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
    RetryableError,
    ValidationError,
)

# Checked in order: subclasses before their bases
ERROR_STATUS: list[tuple[type[DomainError], int, str]] = [
    (NotAuthenticatedError, status.HTTP_401_UNAUTHORIZED, "not_authenticated"),
    (InvitationExpiredError, status.HTTP_410_GONE, "invitation_expired"),
    (InvitationNotFoundError, status.HTTP_404_NOT_FOUND, "invitation_not_found"),
    (
        InvitationTargetMismatchError,
        status.HTTP_403_FORBIDDEN,
        "invitation_target_mismatch",
    ),
    (CannotShareWithSelfError, status.HTTP_409_CONFLICT, "cannot_share_with_self"),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN, "not_authorized"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (BusinessRuleViolationError, status.HTTP_409_CONFLICT, "business_rule_violation"),
    (ValidationError, status.HTTP_400_BAD_REQUEST, "validation_error"),
    (RetryableError, status.HTTP_503_SERVICE_UNAVAILABLE, "temporarily_unavailable"),
]


def status_for(error: DomainError) -> tuple[int, str]:
    """HTTP status and error code for a domain error."""
    for error_type, status_code, code in ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code, code
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error"


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Render a domain error as JSON."""
    status_code, code = status_for(exc)
    retryable = isinstance(exc, RetryableError)

    if status_code >= 500:
        logfire.error(
            "Request failed",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
    else:
        logfire.info(
            "Request rejected",
            path=request.url.path,
            status_code=status_code,
            error_type=type(exc).__name__,
        )

    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "code": code, "retryable": retryable},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the domain error handler on the application."""
    app.add_exception_handler(DomainError, handle_domain_error)
