import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from configs import app_config
from core.http_builtin.errors import (
    HeaderEncodingError,
    HttpBuiltinError,
    InvalidRequestSpecError,
    UnsupportedOptionError,
)
from enums.response_code import ResponseCode
from schemas.response import ApiResponse

logger = logging.getLogger(__name__)

# Errors the caller can fix by changing the request spec
CALLER_ERRORS = (InvalidRequestSpecError, UnsupportedOptionError, HeaderEncodingError)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Request body failed validation
    """
    simplified_errors = [
        {
            "loc": ".".join(map(str, error["loc"])),
            "msg": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content=ApiResponse(
            code=ResponseCode.UNPROCESSABLE_ENTITY,
            msg="Request validation failed",
            data={
                "error": {InvalidRequestSpecError.__name__: InvalidRequestSpecError.error_code},
                "details": simplified_errors,
            },
        ).model_dump(),
    )


async def http_builtin_exception_handler(request: Request, exc: HttpBuiltinError):
    """
    Failures of the http builtin, reported through the error side-channel
    """
    if isinstance(exc, CALLER_ERRORS):
        status_code, code = 400, ResponseCode.BAD_REQUEST
    else:
        status_code, code = 502, ResponseCode.BAD_GATEWAY

    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(
            code=code,
            msg=exc.detail,
            data={"error": exc.as_error_map(), "stage": exc.stage},
        ).model_dump(),
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse(code=exc.status_code, msg=exc.detail, data=None).model_dump(),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Anything not handled above
    """
    logger.exception(f"Unhandled exception on {request.method} {request.url}: {exc}")

    error_detail = None
    if app_config.DEBUG:
        # type and message only, never the stack
        error_detail = {"type": type(exc).__name__, "message": str(exc)}

    return JSONResponse(
        status_code=500,
        content=ApiResponse(
            code=ResponseCode.FAIL, msg="Internal server error", data=error_detail
        ).model_dump(),
    )


def set_up(app: FastAPI):
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HttpBuiltinError, http_builtin_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
