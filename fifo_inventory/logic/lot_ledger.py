# fifo_inventory/logic/lot_ledger.py
import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from fifo_inventory.core.exceptions import (
    DuplicateKeyError,
    InvalidAmountError,
    NotFoundError,
    QuantityBelowConsumedError,
)
from fifo_inventory.core.models.lot import Lot
from fifo_inventory.logic.sorter import LedgerSorter

logger = logging.getLogger(__name__)


class LotLedger:
    """
    Holds every receipt lot, keyed by lot id, with a secondary index of lot ids
    per product in recording order. Recording order is what breaks FIFO ties
    between lots received on the same date.

    The ledger is not thread-safe on its own; the inventory service serializes
    writers per product.
    """
    def __init__(self, sorter: Optional[LedgerSorter] = None):
        self._sorter = sorter or LedgerSorter()
        self._lots: Dict[str, Lot] = {}
        # Stores lot ids per product: { product_id: [lot_id, ...] }
        self._lots_by_product: Dict[str, List[str]] = defaultdict(list)
        logger.debug("LotLedger initialized.")

    @staticmethod
    def validate_lot(lot: Lot):
        """Checks the lot invariants: 0 <= remaining <= quantity and price >= 0."""
        if lot.quantity < Decimal(0):
            raise InvalidAmountError("quantity", lot.quantity, "must not be negative", limit=Decimal(0))
        if lot.remaining_quantity < Decimal(0) or lot.remaining_quantity > lot.quantity:
            raise InvalidAmountError(
                "remaining_quantity", lot.remaining_quantity,
                f"must be between 0 and the lot quantity {lot.quantity}", limit=lot.quantity
            )
        if lot.unit_price < Decimal(0):
            raise InvalidAmountError("unit_price", lot.unit_price, "must not be negative", limit=Decimal(0))

    def add_lot(self, lot: Lot):
        """
        Registers a lot. Its position in the product's recording order is fixed
        from here on.
        """
        if lot.id in self._lots:
            raise DuplicateKeyError("Lot", "id", lot.id, lot.id)
        self.validate_lot(lot)

        self._lots[lot.id] = lot
        self._lots_by_product[lot.product_id].append(lot.id)
        logger.debug(f"Ledger: Added lot {lot.id} (Qty: {lot.quantity}, Remaining: {lot.remaining_quantity}, "
                     f"Price: {lot.unit_price}, Date: {lot.entry_date}) for product {lot.product_id}.")

    def get_lot(self, lot_id: str) -> Lot:
        lot = self._lots.get(lot_id)
        if lot is None:
            raise NotFoundError("Lot", lot_id)
        return lot

    def has_lot(self, lot_id: str) -> bool:
        return lot_id in self._lots

    def list_lots_for(self, product_id: str) -> List[Lot]:
        """All lots of a product in FIFO order (entry date ascending, ties by recording order)."""
        recorded = [self._lots[lot_id] for lot_id in self._lots_by_product.get(product_id, [])]
        return self._sorter.sort_lots_fifo(recorded)

    def available_lots_for(self, product_id: str) -> List[Lot]:
        """Lots of a product that still hold stock, in FIFO order."""
        return [lot for lot in self.list_lots_for(product_id) if lot.remaining_quantity > Decimal(0)]

    def available_quantity(self, product_id: str) -> Decimal:
        """Authoritative stock of a product, summed straight from its lots."""
        qty = sum(
            (self._lots[lot_id].remaining_quantity for lot_id in self._lots_by_product.get(product_id, [])),
            Decimal(0)
        )
        logger.debug(f"Ledger: Available quantity for product {product_id}: {qty}.")
        return qty

    def all_lots(self) -> List[Lot]:
        """Every lot in recording order."""
        return list(self._lots.values())

    def apply_consumption(self, lot_id: str, amount: Decimal):
        """
        Decrements a lot's remaining quantity by amount.
        Fails with InvalidAmountError if amount is negative or exceeds what remains.
        """
        lot = self.get_lot(lot_id)
        if amount < Decimal(0):
            raise InvalidAmountError("amount", amount, "consumption cannot be negative", limit=Decimal(0))
        if amount > lot.remaining_quantity:
            raise InvalidAmountError(
                "amount", amount,
                f"exceeds the remaining quantity {lot.remaining_quantity} of lot {lot_id}",
                limit=lot.remaining_quantity
            )

        lot.remaining_quantity -= amount
        logger.debug(f"Ledger: Consumed {amount} from lot {lot_id}. Lot remaining: {lot.remaining_quantity}.")

    def edit_lot(
        self,
        lot_id: str,
        new_price: Decimal,
        new_date: date,
        new_notes: Optional[str],
        new_quantity: Optional[Decimal] = None
    ) -> Lot:
        """
        Edits a lot's price, date and notes, and optionally its original quantity.

        When a new quantity is given, the amount already consumed is preserved
        exactly: remaining shifts by (new_quantity - quantity). The new quantity
        may not drop below the consumed amount, though an untouched lot can
        be zeroed out. Price, date and notes never touch remaining, and
        allocation lines recorded earlier keep their own unit price.
        """
        lot = self.get_lot(lot_id)

        if new_price < Decimal(0):
            raise InvalidAmountError("unit_price", new_price, "must not be negative", limit=Decimal(0))

        if new_quantity is not None:
            if new_quantity < Decimal(0):
                raise InvalidAmountError("quantity", new_quantity, "must not be negative", limit=Decimal(0))
            consumed = lot.consumed_quantity
            if new_quantity < consumed:
                logger.warning(f"Ledger: Rejected edit of lot {lot_id}: quantity {new_quantity} is below consumed {consumed}.")
                raise QuantityBelowConsumedError(lot_id, new_quantity, consumed)

            remaining_diff = new_quantity - lot.quantity
            lot.remaining_quantity += remaining_diff
            lot.quantity = new_quantity

        lot.unit_price = new_price
        lot.entry_date = new_date
        lot.notes = new_notes
        logger.debug(f"Ledger: Edited lot {lot!r}.")
        return lot
