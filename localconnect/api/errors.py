from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from localconnect.services.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationError,
)


def status_for_service_error(err: ServiceError) -> int:
    if isinstance(err, NotFoundError):
        return 404
    if isinstance(err, PermissionDeniedError):
        return 403
    if isinstance(err, ConflictError):
        return 409
    if isinstance(err, ValidationError):
        return 422
    return 500


async def service_error_handler(request: Request, err: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for_service_error(err),
        content={"detail": {"code": err.code, "message": err.message}},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
