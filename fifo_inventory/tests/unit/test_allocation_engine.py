# fifo_inventory/tests/unit/test_allocation_engine.py

import pytest
from datetime import date
from decimal import Decimal
from itertools import count

from fifo_inventory.core.exceptions import InsufficientStockError, InvalidAmountError
from fifo_inventory.core.models.lot import Lot
from fifo_inventory.logic.allocation_engine import AllocationEngine
from fifo_inventory.logic.lot_ledger import LotLedger


class SequentialIdGenerator:
    def __init__(self, prefix: str = "line"):
        self._prefix = prefix
        self._counter = count(1)

    def new_id(self) -> str:
        return f"{self._prefix}_{next(self._counter)}"


@pytest.fixture
def ledger():
    """Provides an empty LotLedger."""
    return LotLedger()

@pytest.fixture
def engine(ledger):
    """Provides an AllocationEngine over the ledger fixture with predictable line ids."""
    return AllocationEngine(ledger=ledger, id_generator=SequentialIdGenerator())

def add_lot(ledger, lot_id, quantity, price, entry_date, product_id="P1"):
    lot = Lot(
        id=lot_id, product_id=product_id, quantity=Decimal(quantity), remaining_quantity=Decimal(quantity),
        unit_price=Decimal(price), entry_date=entry_date
    )
    ledger.add_lot(lot)
    return lot

@pytest.fixture
def two_lots(ledger):
    """Lot A (2024-01-01, 10 @ 5) and lot B (2024-01-05, 10 @ 7)."""
    add_lot(ledger, "A", "10", "5", date(2024, 1, 1))
    add_lot(ledger, "B", "10", "7", date(2024, 1, 5))
    return ledger

def remaining(ledger, lot_id):
    return ledger.get_lot(lot_id).remaining_quantity

# --- FIFO allocation

def test_allocate_within_oldest_lot(engine, two_lots):
    """Test a request the oldest lot can cover touches only that lot."""
    result = engine.allocate("P1", Decimal("4"), "W1")

    assert len(result.lines) == 1
    line = result.lines[0]
    assert line.lot_id == "A"
    assert line.quantity == Decimal("4")
    assert line.unit_price == Decimal("5")
    assert line.withdrawal_id == "W1"
    assert result.total_cost == Decimal("20") # 4 * 5
    assert remaining(two_lots, "A") == Decimal("6")
    assert remaining(two_lots, "B") == Decimal("10")

def test_allocate_spanning_two_lots(engine, two_lots):
    """Test withdrawing 15 takes all 10 of A at 5 then 5 of B at 7."""
    result = engine.allocate("P1", Decimal("15"), "W1")

    assert [(l.lot_id, l.quantity, l.unit_price) for l in result.lines] == [
        ("A", Decimal("10"), Decimal("5")),
        ("B", Decimal("5"), Decimal("7")),
    ]
    assert result.total_cost == Decimal("85") # 10*5 + 5*7
    assert remaining(two_lots, "A") == Decimal("0")
    assert remaining(two_lots, "B") == Decimal("5")

def test_allocate_ignores_recording_order(engine, ledger):
    """Test an older lot recorded later is still consumed first."""
    add_lot(ledger, "newer", "10", "9", date(2024, 3, 1))
    add_lot(ledger, "older", "10", "2", date(2024, 1, 1))

    result = engine.allocate("P1", Decimal("12"), "W1")

    assert [l.lot_id for l in result.lines] == ["older", "newer"]
    assert result.total_cost == Decimal("38") # 10*2 + 2*9

def test_allocate_same_date_uses_recording_order(engine, ledger):
    """Test lots sharing an entry date are consumed in the order they were recorded."""
    add_lot(ledger, "first", "3", "1", date(2024, 1, 1))
    add_lot(ledger, "second", "3", "2", date(2024, 1, 1))
    add_lot(ledger, "third", "3", "3", date(2024, 1, 1))

    result = engine.allocate("P1", Decimal("7"), "W1")

    assert [(l.lot_id, l.quantity) for l in result.lines] == [
        ("first", Decimal("3")), ("second", Decimal("3")), ("third", Decimal("1"))
    ]

def test_allocate_skips_exhausted_lots(engine, two_lots):
    """Test a later withdrawal continues where the previous one stopped."""
    engine.allocate("P1", Decimal("10"), "W1")

    result = engine.allocate("P1", Decimal("3"), "W2")

    assert [l.lot_id for l in result.lines] == ["B"]
    assert result.total_cost == Decimal("21")

def test_allocate_entire_stock(engine, two_lots):
    """Test withdrawing exactly the available quantity empties every lot."""
    result = engine.allocate("P1", Decimal("20"), "W1")

    assert result.total_cost == Decimal("120")
    assert two_lots.available_quantity("P1") == Decimal("0")
    assert two_lots.available_lots_for("P1") == []

def test_allocate_fractional_quantities(engine, ledger):
    """Test decimal quantities are allocated exactly."""
    add_lot(ledger, "A", "1.25", "4.40", date(2024, 1, 1))
    add_lot(ledger, "B", "2.5", "3.10", date(2024, 1, 2))

    result = engine.allocate("P1", Decimal("2.75"), "W1")

    assert [l.quantity for l in result.lines] == [Decimal("1.25"), Decimal("1.5")]
    assert result.total_cost == Decimal("10.15") # 1.25*4.40 + 1.5*3.10
    assert remaining(ledger, "B") == Decimal("1.0")

def test_allocation_conserves_quantity(engine, two_lots):
    """Test the lines sum to the request and the ledger drops by the same amount."""
    before = two_lots.available_quantity("P1")

    result = engine.allocate("P1", Decimal("13"), "W1")

    assert sum(l.quantity for l in result.lines) == Decimal("13")
    assert two_lots.available_quantity("P1") == before - Decimal("13")
    assert result.total_cost == sum(l.line_cost for l in result.lines)

def test_allocate_line_ids_are_unique(engine, two_lots):
    """Test each allocation line gets its own id."""
    result = engine.allocate("P1", Decimal("15"), "W1")
    assert [l.id for l in result.lines] == ["line_1", "line_2"]

# --- Rejections

def test_allocate_insufficient_stock_changes_nothing(engine, two_lots):
    """Test over-withdrawal raises InsufficientStockError with the shortfall and consumes nothing."""
    with pytest.raises(InsufficientStockError) as excinfo:
        engine.allocate("P1", Decimal("25"), "W1")

    assert excinfo.value.requested == Decimal("25")
    assert excinfo.value.available == Decimal("20")
    assert excinfo.value.shortfall == Decimal("5")
    assert remaining(two_lots, "A") == Decimal("10")
    assert remaining(two_lots, "B") == Decimal("10")

def test_allocate_unknown_product_has_no_stock(engine):
    """Test a product without lots cannot be allocated."""
    with pytest.raises(InsufficientStockError) as excinfo:
        engine.allocate("P_empty", Decimal("1"), "W1")
    assert excinfo.value.available == Decimal("0")

@pytest.mark.parametrize("quantity", [Decimal("0"), Decimal("-3")])
def test_allocate_non_positive_quantity_rejected(engine, two_lots, quantity):
    """Test zero and negative requests raise InvalidAmountError."""
    with pytest.raises(InvalidAmountError):
        engine.allocate("P1", quantity, "W1")
    assert two_lots.available_quantity("P1") == Decimal("20")

def test_plan_does_not_consume(engine, two_lots):
    """Test planning reports the takes without touching the ledger."""
    planned = engine.plan("P1", Decimal("15"))

    assert [(lot.id, take) for lot, take in planned] == [("A", Decimal("10")), ("B", Decimal("5"))]
    assert two_lots.available_quantity("P1") == Decimal("20")
