"""HTTP translation of checkout errors.

Protean's ``ValidationError`` and ``ObjectNotFoundError`` are handled by
``protean.integrations.fastapi.register_exception_handlers``. This module adds
the checkout-specific error kinds on top, along with the unit of work failures
raised when a command handler's transaction is committed.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import DatabaseError, ExpectedVersionError, TransactionError

from ordering.errors import EmptyCartError, PersistenceError, ProductUnavailableError

logger = structlog.get_logger(__name__)


def register_ordering_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(EmptyCartError)
    async def _empty_cart(request: Request, exc: EmptyCartError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": str(exc), "user_id": exc.user_id})

    @app.exception_handler(ProductUnavailableError)
    async def _product_unavailable(request: Request, exc: ProductUnavailableError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"error": str(exc), "product_id": exc.product_id})

    @app.exception_handler(PersistenceError)
    async def _persistence(request: Request, exc: PersistenceError) -> JSONResponse:
        logger.error("Order transaction failed", operation=exc.operation, reason=exc.reason)
        return JSONResponse(status_code=503, content={"error": str(exc)})

    @app.exception_handler(ExpectedVersionError)
    async def _version_conflict(request: Request, exc: ExpectedVersionError) -> JSONResponse:
        logger.warning("Concurrent modification rejected", path=request.url.path, reason=str(exc))
        return JSONResponse(status_code=409, content={"error": "The resource was modified concurrently, retry"})

    @app.exception_handler(TransactionError)
    @app.exception_handler(DatabaseError)
    async def _store_failure(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Transaction commit failed", path=request.url.path, reason=str(exc))
        return JSONResponse(status_code=503, content={"error": f"Could not commit transaction: {exc}"})
