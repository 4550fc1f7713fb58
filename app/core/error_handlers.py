from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.config.settings import get_settings
from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    BusinessRuleError,
    ConflictError,
    DomainError,
    IntegrationError,
    NotFoundError,
    PasswordValidationError,
    ValidationError,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    PasswordValidationError: status.HTTP_400_BAD_REQUEST,
    BusinessRuleError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    IntegrationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _status_for(exc: DomainError) -> int:
    for cls in type(exc).__mro__:
        if cls in ERROR_STATUS_MAP:
            return ERROR_STATUS_MAP[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_body(request: Request, message: str, code: str, details: dict | None) -> dict:
    return {
        "error": message,
        "code": code,
        "details": details or {},
        "request_id": getattr(request.state, "request_id", None),
    }


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = _status_for(exc)
    details = exc.details
    if isinstance(exc, IntegrationError) and get_settings().is_production:
        details = {}

    if status_code >= 500:
        logger.error("domain_error", code=exc.code, message=exc.message, path=request.url.path)
    else:
        logger.info("domain_error", code=exc.code, status=status_code, path=request.url.path)

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(_error_body(request, exc.message, exc.code, details)),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(
            _error_body(request, "Invalid request", "VAL_REQUEST_001", {"errors": errors})
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
    details = {} if get_settings().is_production else {"reason": str(exc)}
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, "Internal server error", "INT_UNEXPECTED", details),
    )
