# fifo_inventory/core/models/request.py

from datetime import date
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

# Amount ranges are checked by the inventory service, which raises typed errors
# with the offending value; the request models only enforce shape.


class ProductCreateRequest(BaseModel):
    """Input payload for creating a product."""
    name: str = Field(..., min_length=1, description="Display name")
    sku: str = Field(..., min_length=1, description="Unique stock keeping unit code")
    description: str = Field(default="", description="Free text description")
    units: Optional[str] = Field(None, description="Unit of measure")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Aluminium sheet 2mm",
                "sku": "AL-SHEET-2",
                "description": "1000x2000mm sheet",
                "units": "sheet"
            }
        },
        extra='ignore'
    )


class ProductUpdateRequest(ProductCreateRequest):
    """Input payload for updating a product's display attributes."""


class LotCreateRequest(BaseModel):
    """Input payload for receiving stock into a new lot."""
    quantity: Decimal = Field(..., description="Quantity received, must be positive")
    unit_price: Decimal = Field(..., description="Cost per unit, must not be negative")
    entry_date: Optional[date] = Field(None, description="Receipt date; defaults to today")
    notes: Optional[str] = Field(None, description="Free text notes")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "quantity": "10",
                "unit_price": "5.00",
                "entry_date": "2024-01-01",
                "notes": "PO-1001"
            }
        },
        extra='ignore'
    )


class LotUpdateRequest(BaseModel):
    """
    Input payload for editing a lot.
    quantity is optional; when given it replaces the original quantity and
    shifts the remaining quantity by the same difference.
    """
    unit_price: Decimal = Field(..., description="New cost per unit")
    entry_date: date = Field(..., description="New receipt date")
    notes: Optional[str] = Field(None, description="New notes")
    quantity: Optional[Decimal] = Field(None, description="New original quantity")

    model_config = ConfigDict(extra='ignore')


class WithdrawalCreateRequest(BaseModel):
    """Input payload for withdrawing stock with FIFO costing."""
    quantity: Decimal = Field(..., description="Quantity to withdraw, must be positive")
    output_date: Optional[date] = Field(None, description="Withdrawal date; defaults to today")
    reference_number: Optional[str] = Field(None, description="External reference")
    notes: Optional[str] = Field(None, description="Free text notes")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "quantity": "15",
                "output_date": "2024-02-01",
                "reference_number": "SO-2001"
            }
        },
        extra='ignore'
    )


class WithdrawalUpdateRequest(BaseModel):
    """Input payload for editing a withdrawal's header metadata."""
    reference_number: Optional[str] = Field(None, description="New external reference")
    notes: Optional[str] = Field(None, description="New notes")

    model_config = ConfigDict(extra='ignore')
