# fifo_inventory/core/models/withdrawal.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, condecimal, ConfigDict
from decimal import Decimal

class AllocationLine(BaseModel):
    """
    Records how much of a withdrawal was taken from one lot, at the price the
    lot carried when the allocation ran. Write-once.
    """
    id: str = Field(..., description="Unique identifier for the allocation line")
    withdrawal_id: str = Field(..., description="Withdrawal this line belongs to")
    lot_id: str = Field(..., description="Lot the quantity was taken from")
    quantity: condecimal(gt=0) = Field(..., description="Quantity taken from the lot")
    unit_price: condecimal(ge=0) = Field(..., description="Lot unit price at allocation time")

    model_config = ConfigDict(frozen=True)

    @property
    def line_cost(self) -> Decimal:
        return self.quantity * self.unit_price


class Withdrawal(BaseModel):
    """
    Represents a stock output costed by FIFO allocation.
    total_cost always equals the sum of its allocation lines' costs.
    """
    id: str = Field(..., description="Unique identifier for the withdrawal")
    product_id: str = Field(..., description="Product withdrawn")
    total_quantity: condecimal(gt=0) = Field(..., description="Requested (and fully allocated) quantity")
    total_cost: condecimal(ge=0) = Field(..., description="Sum of quantity * unit price over the allocation lines")
    reference_number: Optional[str] = Field(None, description="External reference, e.g. an order number")
    output_date: date = Field(..., description="Date of the withdrawal (ISO format)")
    notes: Optional[str] = Field(None, description="Free text notes")
    lines: list[AllocationLine] = Field(default_factory=list, description="Per-lot FIFO allocation")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )
