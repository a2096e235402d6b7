# fifo_inventory/logic/allocation_engine.py
import logging
from decimal import Decimal
from typing import List, NamedTuple, Tuple

from fifo_inventory.core.exceptions import InsufficientStockError, InvalidAmountError
from fifo_inventory.core.models.lot import Lot
from fifo_inventory.core.models.withdrawal import AllocationLine
from fifo_inventory.logic.collaborators import IdGenerator
from fifo_inventory.logic.lot_ledger import LotLedger

logger = logging.getLogger(__name__)


class AllocationResult(NamedTuple):
    lines: List[AllocationLine]
    total_cost: Decimal


class AllocationEngine:
    """
    Implements First-In, First-Out allocation of a withdrawal against the lot ledger.
    Lots are consumed oldest entry date first; lots sharing a date are consumed
    in the order they were recorded.
    """
    def __init__(self, ledger: LotLedger, id_generator: IdGenerator):
        self._ledger = ledger
        self._id_generator = id_generator

    def plan(self, product_id: str, requested_quantity: Decimal) -> List[Tuple[Lot, Decimal]]:
        """
        Works out which lots a withdrawal would draw from, and how much from
        each, without touching the ledger.
        """
        if requested_quantity <= Decimal(0):
            raise InvalidAmountError("quantity", requested_quantity, "must be positive", limit=Decimal(0))

        available_qty = self._ledger.available_quantity(product_id)
        logger.debug(f"FIFO Allocate: Planning {requested_quantity} for product {product_id}. Available: {available_qty}.")

        if requested_quantity > available_qty:
            logger.warning(f"FIFO Allocate: Insufficient stock for product {product_id}. "
                           f"Required: {requested_quantity}, Available: {available_qty}.")
            raise InsufficientStockError(product_id, requested_quantity, available_qty)

        planned: List[Tuple[Lot, Decimal]] = []
        remaining_to_fulfill = requested_quantity

        for lot in self._ledger.available_lots_for(product_id):
            if remaining_to_fulfill == Decimal(0):
                break
            # The last take is the exact remainder, so the takes sum to the request
            take = min(remaining_to_fulfill, lot.remaining_quantity)
            planned.append((lot, take))
            remaining_to_fulfill -= take
            logger.debug(f"  FIFO Allocate: Lot {lot.id} ({lot.entry_date}, Remaining: {lot.remaining_quantity}, "
                         f"Price: {lot.unit_price}) -> take {take}. Still required: {remaining_to_fulfill}.")

        return planned

    def allocate(self, product_id: str, requested_quantity: Decimal, withdrawal_id: str) -> AllocationResult:
        """
        Allocates requested_quantity of a product across its lots in FIFO order,
        consuming the lots in the ledger.

        Returns the allocation lines (one per lot touched, at the lot's current
        unit price) and their total cost. Nothing is consumed if the request
        is not positive or exceeds the product's stock.
        """
        planned = self.plan(product_id, requested_quantity)

        lines: List[AllocationLine] = []
        total_cost = Decimal(0)
        for lot, take in planned:
            line = AllocationLine(
                id=self._id_generator.new_id(),
                withdrawal_id=withdrawal_id,
                lot_id=lot.id,
                quantity=take,
                unit_price=lot.unit_price,
            )
            lines.append(line)
            total_cost += line.line_cost
            self._ledger.apply_consumption(lot.id, take)

        logger.debug(f"FIFO Allocate: Finished withdrawal {withdrawal_id}. Lines: {len(lines)}, Total cost: {total_cost}.")
        return AllocationResult(lines=lines, total_cost=total_cost)
