# storefront/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from storefront.domain.errors import (
    ConcurrencyConflictError,
    InvalidRequestError,
    NotFoundError,
    OwnershipError,
    PaymentGatewayError,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_CODES = {
    NotFoundError: 404,
    InvalidRequestError: 400,
    OwnershipError: 403,
    ConcurrencyConflictError: 409,
    PaymentGatewayError: 502,
}


def _domain_error(status_code: int):
    async def handler(request: Request, exc: Exception) -> JSONResponse:
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc}")
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    return handler


async def _database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(f"{request.method} {request.url.path} blad bazy: {exc!r}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    for exc_class, status_code in STATUS_CODES.items():
        app.add_exception_handler(exc_class, _domain_error(status_code))
    app.add_exception_handler(SQLAlchemyError, _database_error)
