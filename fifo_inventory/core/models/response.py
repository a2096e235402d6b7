# fifo_inventory/core/models/response.py

from decimal import Decimal
from typing import Any, List
from pydantic import BaseModel, Field, ConfigDict


class ErrorResponse(BaseModel):
    """
    Represents an operation that failed validation, with the reason and the
    structured context needed to render a precise message.
    """
    code: str = Field(..., description="Machine-readable error code, e.g. INSUFFICIENT_STOCK")
    message: str = Field(..., description="Human readable reason")
    context: dict[str, Any] = Field(default_factory=dict, description="Offending ids and amounts")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "INSUFFICIENT_STOCK",
                "message": "Insufficient stock for product p-1. Requested 10, only 5 units available",
                "context": {"product_id": "p-1", "requested": "10", "available": "5", "shortfall": "5"}
            }
        }
    )


class ProductValuation(BaseModel):
    """One row of the inventory valuation report."""
    product_id: str
    name: str
    sku: str
    current_stock: Decimal
    average_cost: Decimal
    stock_value: Decimal = Field(..., description="Sum of remaining quantity * unit price over the product's lots")


class InventoryValuationResponse(BaseModel):
    """Represents the stock on hand and its FIFO value across all products."""
    products: List[ProductValuation] = Field(default_factory=list)
    total_value: Decimal = Field(default=Decimal(0), description="Sum of all product stock values")
