"""
Error-to-envelope mapping.

Every failure leaves the service as `{"code": <status>, "message": <text>}`:

- HTTPException raised by endpoints (404, 400) and by the router itself
  (unknown path 404, method not allowed 405) keep their status and detail.
- RequestValidationError becomes 400 with a message for the first failing
  check, so field order (name, price, stock) decides which one is reported.
- ProductError subclasses that escape an endpoint, StorageError in practice,
  use their own status code and raw message.
- Anything else is logged and reported as a 500 envelope.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import ProductError
from app.schemas.envelope import ErrorEnvelope

logger = logging.getLogger(__name__)

VALUE_ERROR_PREFIX = "Value error, "


def error_response(status_code: int, message: str, headers: dict = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorEnvelope(code=status_code, message=message).model_dump(),
        headers=headers,
    )


def _field_path(loc) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    # Bulk payloads are top-level arrays
    if path.startswith("["):
        path = "products" + path
    return path


def describe_validation_error(error: dict) -> str:
    """
    Turn one pydantic error into a client-facing message.

    Examples:
        ('path', 'product_id'), int_parsing    -> "invalid id"
        ('body', 'name'), missing              -> "name is required"
        ('body', 'price'), value_error         -> "price must be greater than 0"
        ('body', 1, 'stock'), value_error      -> "products[1].stock cannot be negative"
    """
    loc = tuple(error.get("loc", ()))
    kind = error.get("type", "")
    message = error.get("msg", "invalid value")

    if kind == "json_invalid":
        return "invalid JSON body"
    if loc[:1] == ("path",):
        return "invalid id"

    field = _field_path(loc[1:])

    if kind == "missing":
        return f"{field} is required" if field else "request body is required"
    if kind == "value_error":
        # Validator messages already start with the field name
        message = message[len(VALUE_ERROR_PREFIX):] if message.startswith(VALUE_ERROR_PREFIX) else message
        parent = field.rsplit(".", 1)[0] + "." if "." in field else ""
        return parent + message
    return f"{field}: {message}" if field else message


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = describe_validation_error(errors[0]) if errors else "invalid request"
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def product_error_handler(request: Request, exc: ProductError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return error_response(exc.status_code, exc.message)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"{request.method} {request.url.path} failed: {exc}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ProductError, product_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
