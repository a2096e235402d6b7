# fifo_inventory/logic/transaction_log.py
import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from fifo_inventory.core.enums.transaction_type import TransactionType
from fifo_inventory.core.exceptions import DuplicateKeyError, NotFoundError
from fifo_inventory.core.models.transaction import Transaction
from fifo_inventory.logic.collaborators import IdGenerator
from fifo_inventory.logic.sorter import LedgerSorter

logger = logging.getLogger(__name__)


class TransactionLog:
    """
    Append-only history of receipts and withdrawals. There is no edit or
    delete: corrections are recorded as new entries.
    """
    def __init__(self, id_generator: IdGenerator, sorter: Optional[LedgerSorter] = None):
        self._id_generator = id_generator
        self._sorter = sorter or LedgerSorter()
        self._entries: List[Transaction] = []
        self._by_id: Dict[str, Transaction] = {}
        # Stores entries per product in recording order: { product_id: [Transaction, ...] }
        self._by_product: Dict[str, List[Transaction]] = defaultdict(list)

    def append(
        self,
        transaction_type: TransactionType,
        product_id: str,
        quantity: Decimal,
        entry_date: date,
        reference_id: str,
        notes: Optional[str] = None
    ) -> Transaction:
        """Records a new movement and returns the stored entry."""
        if not product_id or not reference_id:
            raise ValueError("Transaction log entries need both a product and a reference id.")

        transaction = Transaction(
            id=self._id_generator.new_id(),
            type=transaction_type,
            product_id=product_id,
            quantity=quantity,
            date=entry_date,
            reference_id=reference_id,
            notes=notes,
        )
        self.replay(transaction)
        return transaction

    def replay(self, transaction: Transaction):
        """Stores an already built entry as-is, e.g. one read back from a snapshot."""
        if transaction.id in self._by_id:
            raise DuplicateKeyError("Transaction", "id", transaction.id, transaction.id)
        self._entries.append(transaction)
        self._by_id[transaction.id] = transaction
        self._by_product[transaction.product_id].append(transaction)
        logger.debug(f"Log: Appended {transaction.type.value} {transaction.id} for product {transaction.product_id} "
                     f"(Qty: {transaction.quantity}, Date: {transaction.date}, Ref: {transaction.reference_id}).")

    def get(self, transaction_id: str) -> Transaction:
        transaction = self._by_id.get(transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    def list_for(self, product_id: str) -> List[Transaction]:
        """A product's history, newest date first."""
        return self._sorter.sort_newest_first(self._by_product.get(product_id, []), lambda txn: txn.date)

    def list_all(self) -> List[Transaction]:
        """The whole history, newest date first."""
        return self._sorter.sort_newest_first(self._entries, lambda txn: txn.date)

    def recorded(self) -> List[Transaction]:
        """The whole history in recording order."""
        return list(self._entries)

    def count_for(self, product_id: str) -> int:
        return len(self._by_product.get(product_id, []))
