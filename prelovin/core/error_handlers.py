# prelovin/core/error_handlers.py

from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging
import uuid

from .exceptions import PrelovinError, ErrorCode

logger = logging.getLogger(__name__)

STATUS_CODE_MAP = {
    ErrorCode.PRODUCT_NOT_FOUND: 404,
    ErrorCode.ORDER_NOT_FOUND: 404,
    ErrorCode.CART_ITEM_NOT_FOUND: 404,
    ErrorCode.USER_NOT_FOUND: 404,
    ErrorCode.NOT_AUTHENTICATED: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.INSUFFICIENT_STOCK: 400,
    ErrorCode.STOCK_CONFLICT: 409,
    ErrorCode.OWN_PRODUCT: 400,
    ErrorCode.EMPTY_CART: 400,
    ErrorCode.INVALID_STATUS_TRANSITION: 400,
    ErrorCode.ORDER_PLACEMENT_FAILED: 500,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
    ErrorCode.RATE_LIMIT_EXCEEDED: 429,
}


def _request_context(request: Request) -> dict:
    return {
        "request_id": getattr(request.state, "request_id", None),
        "request_url": str(request.url),
        "request_method": request.method,
    }


def error_body(code: str, message, **extra) -> dict:
    """Shape shared by every error response: ``{"error": {"code", "message", ...}}``."""
    return {"error": {"code": code, "message": message, **extra}}


def _field_errors(exc: RequestValidationError) -> list:
    return [
        {
            "field": " -> ".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]


def setup_error_handlers(app: FastAPI):
    """Register the JSON error handlers on the application."""

    @app.exception_handler(PrelovinError)
    async def prelovin_error_handler(request: Request, exc: PrelovinError):
        status_code = STATUS_CODE_MAP.get(exc.code, 400)
        level = logging.ERROR if status_code >= 500 else logging.INFO
        logger.log(level, f"{exc.code.value} on {request.method} {request.url.path}", extra={
            "error_code": exc.code.value,
            "technical_details": exc.technical_details,
            "context": exc.context,
            **_request_context(request),
        })

        headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
        return JSONResponse(status_code=status_code, content=exc.to_response(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = _field_errors(exc)
        logger.warning(f"Rejected payload on {request.method} {request.url.path}",
                       extra={"validation_errors": errors, **_request_context(request)})
        return JSONResponse(
            status_code=422,
            content=error_body("VALIDATION_ERROR", "Request validation failed", details=errors),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        # Routing misses (404/405) and anything raised straight from FastAPI
        if isinstance(exc.detail, dict) and "error" in exc.detail:
            return JSONResponse(status_code=exc.status_code, content=exc.detail)

        logger.warning(f"HTTP {exc.status_code} on {request.method} {request.url.path}",
                       extra={"detail": exc.detail, **_request_context(request)})
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(f"HTTP_{exc.status_code}", exc.detail, status_code=exc.status_code),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
                         extra=_request_context(request))
        return JSONResponse(
            status_code=500,
            content=error_body(
                ErrorCode.INTERNAL_SERVER_ERROR.value,
                "An internal server error occurred. Please try again later.",
            ),
        )


async def add_request_id_middleware(request: Request, call_next):
    """Tag the request and its response with an ``X-Request-ID``."""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response
