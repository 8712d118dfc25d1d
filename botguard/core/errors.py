import json
import traceback
import uuid
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from botguard.core.config import get_settings
from botguard.core.exceptions import APIException
from botguard.logging.setup import get_logger

settings = get_settings()
logger = get_logger(__name__)


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """
    Xử lý HTTP exceptions và trả về response chuẩn.
    """
    if isinstance(exc, APIException):
        error_detail = exc.to_response()
    else:
        error_detail = {"detail": str(exc.detail)}

    log_data = {
        "path": request.url.path,
        "method": request.method,
        "status_code": exc.status_code,
    }

    logger.warning(
        f"HTTP {exc.status_code} Error: {json.dumps(error_detail, default=str)}",
        extra=log_data,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_detail,
        headers=exc.headers or {},
    )


async def http_422_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Xử lý lỗi validation với chi tiết về các trường bị lỗi.
    """
    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": (
                    ".".join([str(loc) for loc in error["loc"]])
                    if "loc" in error
                    else None
                ),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    content = {"detail": "Validation error", "code": "validation_error", "errors": errors}

    logger.warning(
        f"Validation Error on {request.method} {request.url.path}: "
        f"{json.dumps(errors, default=str)}"
    )

    return JSONResponse(status_code=422, content=content)


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Xử lý lỗi server 500 với thông tin chi tiết trong môi trường dev.
    """
    error_id = uuid.uuid4().hex
    error_type = type(exc).__name__

    content = {
        "detail": "Internal server error",
        "code": "server_error",
        "error_id": error_id,
    }

    if not settings.is_production:
        content["error_type"] = error_type
        content["error_message"] = str(exc)
        content["traceback"] = traceback.format_exception(
            type(exc), exc, exc.__traceback__
        )

    logger.error(
        f"Server Error {error_id} ({error_type}) on {request.method} "
        f"{request.url.path}: {exc}",
        exc_info=exc,
    )

    return JSONResponse(status_code=500, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, http_422_error_handler)
    app.add_exception_handler(Exception, server_error_handler)
