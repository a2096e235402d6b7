# fifo_inventory/logic/sorter.py

from datetime import date
from typing import Callable, List, Sequence, TypeVar

from fifo_inventory.core.models.lot import Lot

T = TypeVar("T")

class LedgerSorter:
    """
    Responsible for the ordering rules shared by the lot ledger and the
    history queries.
    """

    def sort_lots_fifo(self, lots: Sequence[Lot]) -> List[Lot]:
        """
        Orders lots for FIFO consumption.

        Sorting Rules:
        1. Primary sort: entry_date ascending (oldest stock leaves first).
        2. Lots sharing an entry_date keep the order they were given in,
           which callers pass as recording order.

        Args:
            lots: Lots in the order they were recorded.

        Returns:
            A new list of the same lots in FIFO order.
        """
        # Python's sort is stable, so equal dates keep recording order
        return sorted(lots, key=lambda lot: lot.entry_date)

    def sort_newest_first(self, items: Sequence[T], date_key: Callable[[T], date]) -> List[T]:
        """
        Orders history items by date descending. Items sharing a date are
        listed most recently recorded first.

        Args:
            items: Items in the order they were recorded.
            date_key: Extracts the date to sort on.
        """
        # Reverse first so the stable descending sort puts later recordings ahead on ties
        return sorted(reversed(items), key=date_key, reverse=True)
