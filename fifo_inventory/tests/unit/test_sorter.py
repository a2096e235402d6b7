# fifo_inventory/tests/unit/test_sorter.py

import pytest
from datetime import date
from decimal import Decimal

from fifo_inventory.core.enums.transaction_type import TransactionType
from fifo_inventory.core.models.lot import Lot
from fifo_inventory.core.models.transaction import Transaction
from fifo_inventory.logic.sorter import LedgerSorter

@pytest.fixture
def sorter():
    """Provides a LedgerSorter instance for tests."""
    return LedgerSorter()

def make_lot(lot_id: str, entry_date: date) -> Lot:
    return Lot(id=lot_id, product_id="P1", quantity=Decimal("10"), remaining_quantity=Decimal("10"),
               unit_price=Decimal("1"), entry_date=entry_date)

def make_txn(txn_id: str, txn_date: date) -> Transaction:
    return Transaction(id=txn_id, type=TransactionType.ENTRY, product_id="P1", quantity=Decimal("1"),
                       date=txn_date, reference_id=f"ref_{txn_id}")

def test_sort_lots_fifo_empty(sorter):
    """Test sorting an empty lot list."""
    assert sorter.sort_lots_fifo([]) == []

def test_sort_lots_fifo_orders_by_entry_date(sorter):
    """Test lots come back oldest entry date first regardless of recording order."""
    lots = [make_lot("L3", date(2024, 3, 1)), make_lot("L1", date(2024, 1, 1)), make_lot("L2", date(2024, 2, 1))]

    sorted_lots = sorter.sort_lots_fifo(lots)

    assert [lot.id for lot in sorted_lots] == ["L1", "L2", "L3"]

def test_sort_lots_fifo_keeps_recording_order_on_same_date(sorter):
    """Test lots sharing an entry date keep the order they were recorded in."""
    lots = [
        make_lot("late", date(2024, 2, 1)),
        make_lot("same_first", date(2024, 1, 1)),
        make_lot("same_second", date(2024, 1, 1)),
        make_lot("same_third", date(2024, 1, 1)),
    ]

    sorted_lots = sorter.sort_lots_fifo(lots)

    assert [lot.id for lot in sorted_lots] == ["same_first", "same_second", "same_third", "late"]

def test_sort_lots_fifo_does_not_mutate_input(sorter):
    """Test the input sequence is left as given."""
    lots = [make_lot("L2", date(2024, 2, 1)), make_lot("L1", date(2024, 1, 1))]
    sorter.sort_lots_fifo(lots)
    assert [lot.id for lot in lots] == ["L2", "L1"]

def test_sort_newest_first_orders_by_date_descending(sorter):
    """Test history items come back newest date first."""
    txns = [make_txn("T1", date(2024, 1, 1)), make_txn("T3", date(2024, 3, 1)), make_txn("T2", date(2024, 2, 1))]

    sorted_txns = sorter.sort_newest_first(txns, lambda t: t.date)

    assert [t.id for t in sorted_txns] == ["T3", "T2", "T1"]

def test_sort_newest_first_puts_latest_recorded_first_on_same_date(sorter):
    """Test items sharing a date are listed most recently recorded first."""
    txns = [
        make_txn("first", date(2024, 1, 1)),
        make_txn("second", date(2024, 1, 1)),
        make_txn("older", date(2023, 12, 31)),
        make_txn("third", date(2024, 1, 1)),
    ]

    sorted_txns = sorter.sort_newest_first(txns, lambda t: t.date)

    assert [t.id for t in sorted_txns] == ["third", "second", "first", "older"]
