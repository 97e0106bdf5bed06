"""
Maps service-layer exceptions to HTTP responses.

Routers let domain exceptions propagate; these handlers turn them into
``{"detail": ...}`` JSON with the matching status code.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.services.client_service import ClientExistsError, ClientNotFoundError
from app.services.paginator import PageOutOfRangeError
from app.services.product_service import ProductNotFoundError
from app.services.user_service import UserExistsError, UserNotFoundError

logger = logging.getLogger(__name__)

_NOT_FOUND_EXCEPTIONS: list[type[Exception]] = [
    UserNotFoundError,
    ClientNotFoundError,
    ProductNotFoundError,
    PageOutOfRangeError,
]

_CONFLICT_EXCEPTIONS: list[type[Exception]] = [
    UserExistsError,
    ClientExistsError,
]


def _make_handler(status_code: int):
    async def handler(_request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


async def _unhandled_exception_handler(request: Request, _exc: Exception) -> JSONResponse:
    """
    Catch-all for unexpected errors, including programming defects such as
    DuplicateMetaKey. The traceback is logged; the client gets a generic body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "An internal server error occurred."},
    )


def register_exception_handlers(app: FastAPI) -> None:
    not_found_handler = _make_handler(404)
    for exc_class in _NOT_FOUND_EXCEPTIONS:
        app.add_exception_handler(exc_class, not_found_handler)

    conflict_handler = _make_handler(409)
    for exc_class in _CONFLICT_EXCEPTIONS:
        app.add_exception_handler(exc_class, conflict_handler)

    app.add_exception_handler(Exception, _unhandled_exception_handler)
