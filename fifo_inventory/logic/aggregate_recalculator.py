# fifo_inventory/logic/aggregate_recalculator.py
import logging
from decimal import Decimal
from typing import Iterable, Tuple

from fifo_inventory.core.models.lot import Lot
from fifo_inventory.core.models.product import Product
from fifo_inventory.logic.collaborators import Clock

logger = logging.getLogger(__name__)


class AggregateRecalculator:
    """
    Derives a product's current stock and average cost from its lots.
    The aggregates are always rebuilt from scratch, never patched.
    """
    def __init__(self, clock: Clock):
        self._clock = clock

    def summarize(self, lots: Iterable[Lot]) -> Tuple[Decimal, Decimal]:
        """Returns (stock, value) summed over lots that still hold stock."""
        current_stock = Decimal(0)
        total_value = Decimal(0)
        for lot in lots:
            if lot.remaining_quantity > Decimal(0):
                current_stock += lot.remaining_quantity
                total_value += lot.remaining_quantity * lot.unit_price
        return current_stock, total_value

    def recalculate(self, product: Product, lots: Iterable[Lot]) -> Product:
        """
        Returns a copy of product with current_stock and average_cost rebuilt
        from lots. An empty product has an average cost of zero.

        updated_at is only stamped when an aggregate actually moves, so
        recalculating an unchanged lot set returns an identical product.
        """
        current_stock, total_value = self.summarize(lots)
        if current_stock > Decimal(0):
            average_cost = total_value / current_stock
        else:
            average_cost = Decimal(0)

        logger.debug(f"Recalculated product {product.id}: stock={current_stock}, average_cost={average_cost}.")
        if current_stock == product.current_stock and average_cost == product.average_cost:
            return product.model_copy()
        return product.model_copy(update={
            "current_stock": current_stock,
            "average_cost": average_cost,
            "updated_at": self._clock.now(),
        })
