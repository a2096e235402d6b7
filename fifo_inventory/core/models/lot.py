# fifo_inventory/core/models/lot.py

from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, condecimal, ConfigDict
from decimal import Decimal

class Lot(BaseModel):
    """
    Represents a single receipt of stock: a dated, priced batch consumed FIFO.
    remaining_quantity is kept within [0, quantity] by the lot ledger.
    """
    id: str = Field(..., description="Unique identifier for the lot")
    product_id: str = Field(..., description="Product this lot belongs to")
    quantity: condecimal(ge=0) = Field(..., description="Original quantity received")
    remaining_quantity: condecimal(ge=0) = Field(..., description="Quantity not yet allocated to withdrawals")
    unit_price: condecimal(ge=0) = Field(..., description="Cost per unit of this lot")
    entry_date: date = Field(..., description="Receipt date (ISO format), drives FIFO order")
    notes: Optional[str] = Field(None, description="Free text notes")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )

    @property
    def consumed_quantity(self) -> Decimal:
        """Quantity already allocated to withdrawals."""
        return self.quantity - self.remaining_quantity

    def __repr__(self) -> str:
        return (f"Lot(id='{self.id}', "
                f"entry_date={self.entry_date.isoformat()}, "
                f"original_qty={self.quantity}, "
                f"remaining_qty={self.remaining_quantity}, "
                f"unit_price={self.unit_price})")
