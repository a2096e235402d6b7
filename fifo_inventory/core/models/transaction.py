# fifo_inventory/core/models/transaction.py

import datetime
from typing import Optional
from pydantic import BaseModel, Field, condecimal, ConfigDict

from fifo_inventory.core.enums.transaction_type import TransactionType


class Transaction(BaseModel):
    """
    Represents one entry of the stock movement history.
    Entries are immutable: corrections are new entries, never edits.
    """
    id: str = Field(..., description="Unique identifier for the log entry")
    type: TransactionType = Field(..., description="entry (receipt) or output (withdrawal)")
    product_id: str = Field(..., description="Product the movement applies to")
    quantity: condecimal(gt=0) = Field(..., description="Quantity received or withdrawn")
    date: datetime.date = Field(..., description="Date of the movement (ISO format)")
    reference_id: str = Field(..., description="Lot id for entries, withdrawal id for outputs")
    notes: Optional[str] = Field(None, description="Free text notes copied from the movement")

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )
