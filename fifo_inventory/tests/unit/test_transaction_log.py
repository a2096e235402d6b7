# fifo_inventory/tests/unit/test_transaction_log.py

import pytest
from datetime import date
from decimal import Decimal
from itertools import count
from unittest.mock import MagicMock
from pydantic import ValidationError

from fifo_inventory.core.enums.transaction_type import TransactionType
from fifo_inventory.core.exceptions import DuplicateKeyError, NotFoundError
from fifo_inventory.logic.transaction_log import TransactionLog

@pytest.fixture
def id_generator():
    """Provides a mock id generator returning txn_1, txn_2, ..."""
    counter = count(1)
    generator = MagicMock()
    generator.new_id.side_effect = lambda: f"txn_{next(counter)}"
    return generator

@pytest.fixture
def log(id_generator):
    """Provides an empty TransactionLog."""
    return TransactionLog(id_generator=id_generator)

def test_append_entry(log):
    """Test appending returns the stored transaction with a generated id."""
    txn = log.append(TransactionType.ENTRY, "P1", Decimal("10"), date(2024, 1, 1), "lot_1", "PO-1")

    assert txn.id == "txn_1"
    assert txn.type == TransactionType.ENTRY
    assert txn.product_id == "P1"
    assert txn.quantity == Decimal("10")
    assert txn.date == date(2024, 1, 1)
    assert txn.reference_id == "lot_1"
    assert txn.notes == "PO-1"
    assert log.get("txn_1") == txn

def test_append_requires_reference(log):
    """Test an entry without a reference id is refused."""
    with pytest.raises(ValueError):
        log.append(TransactionType.OUTPUT, "P1", Decimal("1"), date(2024, 1, 1), "")

def test_get_unknown(log):
    """Test fetching an unknown transaction raises NotFoundError."""
    with pytest.raises(NotFoundError):
        log.get("missing")

def test_list_for_newest_first(log):
    """Test a product's history is listed newest date first."""
    log.append(TransactionType.ENTRY, "P1", Decimal("10"), date(2024, 1, 1), "lot_1")
    log.append(TransactionType.OUTPUT, "P1", Decimal("4"), date(2024, 3, 1), "w_1")
    log.append(TransactionType.ENTRY, "P1", Decimal("5"), date(2024, 2, 1), "lot_2")
    log.append(TransactionType.ENTRY, "P2", Decimal("1"), date(2024, 4, 1), "lot_3")

    assert [t.reference_id for t in log.list_for("P1")] == ["w_1", "lot_2", "lot_1"]
    assert [t.reference_id for t in log.list_for("P2")] == ["lot_3"]
    assert log.list_for("P_unknown") == []

def test_list_all_spans_products(log):
    """Test the whole history is listed newest first across products."""
    log.append(TransactionType.ENTRY, "P1", Decimal("10"), date(2024, 1, 1), "lot_1")
    log.append(TransactionType.ENTRY, "P2", Decimal("1"), date(2024, 4, 1), "lot_2")

    assert [t.product_id for t in log.list_all()] == ["P2", "P1"]

def test_recorded_keeps_recording_order(log):
    """Test recorded() returns entries in the order they were appended."""
    log.append(TransactionType.ENTRY, "P1", Decimal("10"), date(2024, 5, 1), "lot_1")
    log.append(TransactionType.ENTRY, "P1", Decimal("10"), date(2024, 1, 1), "lot_2")

    assert [t.id for t in log.recorded()] == ["txn_1", "txn_2"]

def test_counts(log):
    """Test per-product counts used by delete protection."""
    assert log.count_for("P1") == 0
    log.append(TransactionType.ENTRY, "P1", Decimal("10"), date(2024, 1, 1), "lot_1")
    log.append(TransactionType.OUTPUT, "P1", Decimal("2"), date(2024, 1, 2), "w_1")

    assert log.count_for("P1") == 2
    assert log.count_for("P2") == 0

def test_replay_rejects_duplicate_id(log):
    """Test replaying an entry whose id is already recorded raises DuplicateKeyError."""
    txn = log.append(TransactionType.ENTRY, "P1", Decimal("10"), date(2024, 1, 1), "lot_1")
    with pytest.raises(DuplicateKeyError):
        log.replay(txn)
    assert log.count_for("P1") == 1

def test_entries_are_immutable(log):
    """Test recorded transactions cannot be edited in place."""
    txn = log.append(TransactionType.ENTRY, "P1", Decimal("10"), date(2024, 1, 1), "lot_1")
    with pytest.raises(ValidationError):
        txn.quantity = Decimal("11")
