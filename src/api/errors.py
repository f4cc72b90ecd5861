"""Mapping of domain errors to HTTP responses.

Every CollaborationError becomes ``{kind, message, details}`` with a
status code chosen by its kind. Unknown kinds map to 400.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from structlog import get_logger

from src.domain.exceptions import CollaborationError

logger = get_logger(__name__)

STATUS_BY_KIND: dict[str, int] = {
    "NOT_FOUND": 404,
    "ALREADY_EXISTS": 409,
    "CONCURRENT_MODIFICATION": 409,
    "CAPACITY_EXCEEDED": 409,
    "SUBJECT_UNDER_DISPUTE": 409,
    "VALIDATION_ERROR": 422,
    "OFFER_EXPIRED": 410,
    "INVALID_TRANSITION": 400,
    "INVALID_STATE": 400,
    "IRREVERSIBLE_STATE": 400,
    "ESCROW_NOT_FUNDED": 400,
    "INVALID_ESCALATION": 400,
}


def status_for(error: CollaborationError) -> int:
    return STATUS_BY_KIND.get(error.kind, 400)


async def collaboration_error_handler(
    request: Request, exc: CollaborationError
) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(
        "request_rejected",
        kind=exc.kind,
        status_code=status_code,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CollaborationError, collaboration_error_handler)  # type: ignore[arg-type]
