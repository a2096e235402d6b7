# fifo_inventory/core/models/snapshot.py

from datetime import datetime
from typing import List
from pydantic import BaseModel, Field

from fifo_inventory.core.models.product import Product
from fifo_inventory.core.models.lot import Lot
from fifo_inventory.core.models.withdrawal import Withdrawal
from fifo_inventory.core.models.transaction import Transaction


class InventorySnapshot(BaseModel):
    """
    Full in-memory state of the engine, for backup and restore by a durable store.
    Lots and transactions are listed in recording order; that order is what
    breaks FIFO ties between lots received on the same date.
    """
    exported_at: datetime = Field(..., description="When the snapshot was taken")
    products: List[Product] = Field(default_factory=list)
    lots: List[Lot] = Field(default_factory=list)
    withdrawals: List[Withdrawal] = Field(default_factory=list, description="Withdrawals with their allocation lines")
    transactions: List[Transaction] = Field(default_factory=list)
