# fifo_inventory/api/errors.py

import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fifo_inventory.core.exceptions import (
    DuplicateKeyError,
    InsufficientStockError,
    InvalidAmountError,
    InventoryError,
    NotFoundError,
    QuantityBelowConsumedError,
    ReferentialIntegrityError,
)
from fifo_inventory.core.models.response import ErrorResponse

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[InventoryError], int] = {
    NotFoundError: 404,
    DuplicateKeyError: 409,
    InvalidAmountError: 422,
    QuantityBelowConsumedError: 409,
    InsufficientStockError: 409,
    ReferentialIntegrityError: 409,
}


def status_code_for(exc: InventoryError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return 400


async def inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    """Renders any InventoryError as an ErrorResponse body."""
    status_code = status_code_for(exc)
    logger.info(f"{request.method} {request.url.path} rejected with {exc.code}: {exc}")
    body = ErrorResponse(**exc.to_dict())
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(InventoryError, inventory_error_handler)
