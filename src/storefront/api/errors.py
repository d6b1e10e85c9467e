"""HTTP mapping of storefront and Protean errors.

Protean's own handlers are installed first; the handlers below take over for
the classes the storefront raises so that every failure carries a
``message`` the client can show as-is.
"""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers as register_protean_handlers

from storefront.shared.errors import error_messages
from storefront.utils.logging import current_environment, get_logger

logger = get_logger(__name__)


def _error_body(exc: Exception) -> dict:
    return {
        "message": "; ".join(error_messages(exc)),
        "error": type(exc).__name__,
    }


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_rejected", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def business_rule_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("request_failed", path=request.url.path, error=type(exc).__name__, reason=error_messages(exc))
    return JSONResponse(status_code=400, content=_error_body(exc))


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    logger.info("resource_not_found", path=request.url.path, error=type(exc).__name__)
    return JSONResponse(status_code=404, content=_error_body(exc))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", path=request.url.path)
    if current_environment() == "production":
        return JSONResponse(status_code=500, content={"message": "Internal server error"})
    return JSONResponse(status_code=500, content={"message": str(exc), "error": type(exc).__name__})


def register_exception_handlers(app: FastAPI) -> None:
    register_protean_handlers(app)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, business_rule_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
