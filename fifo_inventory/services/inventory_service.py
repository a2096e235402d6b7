# fifo_inventory/services/inventory_service.py

import logging
import threading
from collections import defaultdict
from contextlib import ExitStack, contextmanager
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional

from fifo_inventory.core.enums.transaction_type import TransactionType
from fifo_inventory.core.exceptions import (
    DuplicateKeyError,
    InvalidAmountError,
    NotFoundError,
    ReferentialIntegrityError,
)
from fifo_inventory.core.models.lot import Lot
from fifo_inventory.core.models.product import Product
from fifo_inventory.core.models.response import InventoryValuationResponse, ProductValuation
from fifo_inventory.core.models.snapshot import InventorySnapshot
from fifo_inventory.core.models.transaction import Transaction
from fifo_inventory.core.models.withdrawal import AllocationLine, Withdrawal
from fifo_inventory.logic.aggregate_recalculator import AggregateRecalculator
from fifo_inventory.logic.allocation_engine import AllocationEngine
from fifo_inventory.logic.collaborators import (
    ChangeNotifier,
    Clock,
    IdGenerator,
    LoggingChangeNotifier,
    SystemClock,
    UUIDGenerator,
)
from fifo_inventory.logic.lot_ledger import LotLedger
from fifo_inventory.logic.sorter import LedgerSorter
from fifo_inventory.logic.transaction_log import TransactionLog

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _require_positive(field: str, value: Decimal):
    if value <= Decimal(0):
        raise InvalidAmountError(field, value, "must be positive", limit=Decimal(0))


def _require_non_negative(field: str, value: Decimal):
    if value < Decimal(0):
        raise InvalidAmountError(field, value, "must not be negative", limit=Decimal(0))


class InventoryService:
    """
    Orchestrates products, receipts, lot edits and FIFO withdrawals.

    Every write against a product runs its whole sequence (mutate lots, append
    to the log, recalculate the aggregate) under that product's lock, so at
    most one writer per product is in flight. Product creation, update and
    deletion also hold the registry lock guarding the product map and SKU
    index. Lock order is always registry before product.

    Aggregates are published by swapping the stored Product object, and
    withdrawals are stored only once complete, so readers can take lock-free
    snapshots. Reads return copies.
    """
    def __init__(
        self,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
        notifier: Optional[ChangeNotifier] = None,
        sorter: Optional[LedgerSorter] = None
    ):
        # Dependency Injection: collaborators are supplied by the host, with defaults
        self._id_generator = id_generator or UUIDGenerator()
        self._clock = clock or SystemClock()
        self._notifier = notifier or LoggingChangeNotifier()
        self._sorter = sorter or LedgerSorter()
        self._recalculator = AggregateRecalculator(clock=self._clock)

        self._registry_lock = threading.RLock()
        self._locks_guard = threading.Lock()
        self._product_locks: Dict[str, threading.RLock] = {}

        self._products: Dict[str, Product] = {}
        self._sku_index: Dict[str, str] = {}
        self._withdrawals: Dict[str, Withdrawal] = {}
        self._withdrawals_by_product: Dict[str, List[str]] = defaultdict(list)
        self._ledger = LotLedger(sorter=self._sorter)
        self._log = TransactionLog(id_generator=self._id_generator, sorter=self._sorter)
        self._engine = AllocationEngine(ledger=self._ledger, id_generator=self._id_generator)

    # --- Locking and notification helpers

    def _lock_for(self, product_id: str) -> threading.RLock:
        """
        The product's write lock. Locks exist only for stored products; they are
        added on creation and restore and dropped on deletion.
        """
        with self._locks_guard:
            lock = self._product_locks.get(product_id)
        if lock is None:
            raise NotFoundError("Product", product_id)
        return lock

    @contextmanager
    def _locked_product(self, product_id: str) -> Iterator[Product]:
        """Holds the product's lock and yields the product, failing if it does not exist."""
        with self._lock_for(product_id):
            yield self._require_product(product_id)

    @contextmanager
    def _locked_everything(self) -> Iterator[None]:
        with self._registry_lock:
            with ExitStack() as stack:
                for product_id in sorted(self._products):
                    stack.enter_context(self._lock_for(product_id))
                yield

    def _notify_changed(self):
        # Delivery is best-effort: a failing observer must not fail the operation
        try:
            self._notifier.notify_changed()
        except Exception as e:
            logger.warning(f"Change notification failed: {type(e).__name__}: {e}")

    def _require_product(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def _recalculate(self, product: Product):
        self._products[product.id] = self._recalculator.recalculate(
            product, self._ledger.list_lots_for(product.id)
        )

    def _require_unique_sku(self, sku: str, product_id: Optional[str] = None):
        existing_id = self._sku_index.get(sku)
        if existing_id is not None and existing_id != product_id:
            raise DuplicateKeyError("Product", "sku", sku, existing_id)

    # --- Products

    def list_products(self) -> List[Product]:
        """All products sorted by name."""
        products = list(self._products.values())
        return [p.model_copy() for p in sorted(products, key=lambda p: p.name)]

    def get_product(self, product_id: str) -> Product:
        return self._require_product(product_id).model_copy()

    def create_product(self, name: str, sku: str, description: str = "", units: Optional[str] = None) -> Product:
        with self._registry_lock:
            self._require_unique_sku(sku)
            now = self._clock.now()
            product = Product(
                id=self._id_generator.new_id(),
                name=name,
                sku=sku,
                description=description,
                units=units,
                current_stock=Decimal(0),
                average_cost=Decimal(0),
                created_at=now,
                updated_at=now,
            )
            with self._locks_guard:
                self._product_locks[product.id] = threading.RLock()
            self._products[product.id] = product
            self._sku_index[sku] = product.id

        logger.info(f"Created product {product.id} (SKU: {sku}).")
        self._notify_changed()
        return product.model_copy()

    def update_product(
        self, product_id: str, name: str, sku: str, description: str = "", units: Optional[str] = None
    ) -> Product:
        """Updates display attributes. Reusing the product's own SKU is not a collision."""
        with self._registry_lock:
            with self._locked_product(product_id) as product:
                self._require_unique_sku(sku, product_id=product_id)
                updated = product.model_copy(update={
                    "name": name,
                    "sku": sku,
                    "description": description,
                    "units": units,
                    "updated_at": self._clock.now(),
                })
                if product.sku != sku:
                    del self._sku_index[product.sku]
                    self._sku_index[sku] = product_id
                self._products[product_id] = updated

        logger.info(f"Updated product {product_id}.")
        self._notify_changed()
        return updated.model_copy()

    def delete_product(self, product_id: str):
        """Deletes a product. Products with any transaction history are kept."""
        with self._registry_lock:
            with self._locked_product(product_id) as product:
                transaction_count = self._log.count_for(product_id)
                if transaction_count > 0:
                    raise ReferentialIntegrityError(product_id, transaction_count)
                del self._products[product_id]
                del self._sku_index[product.sku]
            with self._locks_guard:
                self._product_locks.pop(product_id, None)

        logger.info(f"Deleted product {product_id}.")
        self._notify_changed()

    # --- Lots

    def add_stock_lot(
        self,
        product_id: str,
        quantity: Any,
        unit_price: Any,
        entry_date: Optional[date] = None,
        notes: Optional[str] = None
    ) -> Lot:
        """Receives stock into a new lot, logs the receipt and refreshes the product's aggregates."""
        quantity = _to_decimal(quantity)
        unit_price = _to_decimal(unit_price)

        with self._locked_product(product_id) as product:
            _require_positive("quantity", quantity)
            _require_non_negative("unit_price", unit_price)
            entry_date = entry_date or self._clock.now().date()

            lot = Lot(
                id=self._id_generator.new_id(),
                product_id=product_id,
                quantity=quantity,
                remaining_quantity=quantity,
                unit_price=unit_price,
                entry_date=entry_date,
                notes=notes,
            )
            self._ledger.add_lot(lot)
            self._log.append(TransactionType.ENTRY, product_id, quantity, entry_date, lot.id, notes)
            self._recalculate(product)
            result = lot.model_copy()

        logger.info(f"Received {quantity} of product {product_id} at {unit_price} into lot {lot.id}.")
        self._notify_changed()
        return result

    def list_lots(self, product_id: str) -> List[Lot]:
        """A product's lots in FIFO order."""
        with self._locked_product(product_id):
            return [lot.model_copy() for lot in self._ledger.list_lots_for(product_id)]

    def get_lot(self, lot_id: str) -> Lot:
        lot = self._ledger.get_lot(lot_id)
        with self._lock_for(lot.product_id):
            return lot.model_copy()

    def edit_lot(
        self,
        lot_id: str,
        unit_price: Any,
        entry_date: date,
        notes: Optional[str] = None,
        quantity: Optional[Any] = None
    ) -> Lot:
        """
        Edits a lot's price, date and notes, and optionally its original quantity,
        then refreshes the product's aggregates. See LotLedger.edit_lot.
        """
        unit_price = _to_decimal(unit_price)
        quantity = _to_decimal(quantity) if quantity is not None else None
        product_id = self._ledger.get_lot(lot_id).product_id

        with self._locked_product(product_id) as product:
            lot = self._ledger.edit_lot(lot_id, unit_price, entry_date, notes, quantity)
            self._recalculate(product)
            result = lot.model_copy()

        logger.info(f"Edited lot {lot_id} of product {product_id}.")
        self._notify_changed()
        return result

    # --- Withdrawals

    def create_withdrawal(
        self,
        product_id: str,
        quantity: Any,
        output_date: Optional[date] = None,
        reference_number: Optional[str] = None,
        notes: Optional[str] = None
    ) -> Withdrawal:
        """
        Withdraws stock with FIFO costing. The request is either fully
        allocated or rejected with no change to any lot.
        """
        quantity = _to_decimal(quantity)

        with self._locked_product(product_id) as product:
            withdrawal_id = self._id_generator.new_id()
            lines, total_cost = self._engine.allocate(product_id, quantity, withdrawal_id)
            output_date = output_date or self._clock.now().date()

            withdrawal = Withdrawal(
                id=withdrawal_id,
                product_id=product_id,
                total_quantity=quantity,
                total_cost=total_cost,
                reference_number=reference_number,
                output_date=output_date,
                notes=notes,
                lines=lines,
            )
            self._withdrawals[withdrawal_id] = withdrawal
            self._withdrawals_by_product[product_id].append(withdrawal_id)
            self._log.append(TransactionType.OUTPUT, product_id, quantity, output_date, withdrawal_id, notes)
            self._recalculate(product)

        logger.info(f"Withdrew {quantity} of product {product_id} as {withdrawal_id}. "
                    f"Total cost: {total_cost} over {len(lines)} lot(s).")
        self._notify_changed()
        return withdrawal.model_copy(deep=True)

    def list_withdrawals(self, product_id: str) -> List[Withdrawal]:
        """A product's withdrawals, newest first."""
        self._require_product(product_id)
        recorded = [self._withdrawals[w_id] for w_id in list(self._withdrawals_by_product.get(product_id, []))]
        ordered = self._sorter.sort_newest_first(recorded, lambda w: w.output_date)
        return [w.model_copy(deep=True) for w in ordered]

    def get_withdrawal(self, withdrawal_id: str) -> Withdrawal:
        withdrawal = self._withdrawals.get(withdrawal_id)
        if withdrawal is None:
            raise NotFoundError("Withdrawal", withdrawal_id)
        return withdrawal.model_copy(deep=True)

    def list_allocation_lines(self, withdrawal_id: str) -> List[AllocationLine]:
        """The FIFO allocation of a withdrawal, in the order the lots were consumed."""
        return list(self.get_withdrawal(withdrawal_id).lines)

    def update_withdrawal(
        self, withdrawal_id: str, reference_number: Optional[str] = None, notes: Optional[str] = None
    ) -> Withdrawal:
        """Edits a withdrawal's reference and notes. Quantities, cost, date and lines are fixed."""
        current = self.get_withdrawal(withdrawal_id)
        with self._locked_product(current.product_id):
            stored = self._withdrawals.get(withdrawal_id)
            if stored is None:
                raise NotFoundError("Withdrawal", withdrawal_id)
            updated = stored.model_copy(update={
                "reference_number": reference_number,
                "notes": notes,
            })
            self._withdrawals[withdrawal_id] = updated

        logger.info(f"Updated withdrawal {withdrawal_id}.")
        self._notify_changed()
        return updated.model_copy(deep=True)

    # --- History

    def list_transactions(self, product_id: str) -> List[Transaction]:
        self._require_product(product_id)
        return self._log.list_for(product_id)

    def list_all_transactions(self) -> List[Transaction]:
        return self._log.list_all()

    def get_transaction_allocation_lines(self, transaction_id: str) -> List[AllocationLine]:
        """FIFO details behind a log entry: the allocation lines of an output, nothing for an entry."""
        transaction = self._log.get(transaction_id)
        if transaction.type != TransactionType.OUTPUT:
            return []
        return self.list_allocation_lines(transaction.reference_id)

    # --- Reports

    def inventory_valuation(self) -> InventoryValuationResponse:
        """Stock on hand and its value at lot prices, per product and in total."""
        rows: List[ProductValuation] = []
        total_value = Decimal(0)
        for product in self.list_products():
            try:
                lock = self._lock_for(product.id)
            except NotFoundError:
                # Deleted since the listing was taken
                continue
            with lock:
                current = self._products.get(product.id)
                if current is None:
                    continue
                current_stock, stock_value = self._recalculator.summarize(self._ledger.list_lots_for(product.id))
            rows.append(ProductValuation(
                product_id=current.id,
                name=current.name,
                sku=current.sku,
                current_stock=current_stock,
                average_cost=current.average_cost,
                stock_value=stock_value,
            ))
            total_value += stock_value
        return InventoryValuationResponse(products=rows, total_value=total_value)

    # --- Snapshot

    def export_snapshot(self) -> InventorySnapshot:
        """A consistent copy of the whole state, for a durable store to persist."""
        with self._locked_everything():
            return InventorySnapshot(
                exported_at=self._clock.now(),
                products=[p.model_copy() for p in self._products.values()],
                lots=[lot.model_copy() for lot in self._ledger.all_lots()],
                withdrawals=[w.model_copy(deep=True) for w in self._withdrawals.values()],
                transactions=self._log.recorded(),
            )

    def restore_snapshot(self, snapshot: InventorySnapshot):
        """
        Replaces the whole state with a snapshot's. Everything is validated and
        rebuilt first, so a rejected snapshot leaves the current state untouched.
        Product aggregates are recomputed from the restored lots.
        """
        products: Dict[str, Product] = {}
        sku_index: Dict[str, str] = {}
        for product in snapshot.products:
            if product.id in products:
                raise DuplicateKeyError("Product", "id", product.id, product.id)
            if product.sku in sku_index:
                raise DuplicateKeyError("Product", "sku", product.sku, sku_index[product.sku])
            products[product.id] = product.model_copy()
            sku_index[product.sku] = product.id

        ledger = LotLedger(sorter=self._sorter)
        for lot in snapshot.lots:
            if lot.product_id not in products:
                raise NotFoundError("Product", lot.product_id)
            ledger.add_lot(lot.model_copy())

        withdrawals: Dict[str, Withdrawal] = {}
        withdrawals_by_product: Dict[str, List[str]] = defaultdict(list)
        for withdrawal in snapshot.withdrawals:
            if withdrawal.id in withdrawals:
                raise DuplicateKeyError("Withdrawal", "id", withdrawal.id, withdrawal.id)
            if withdrawal.product_id not in products:
                raise NotFoundError("Product", withdrawal.product_id)
            for line in withdrawal.lines:
                # A line may only draw from a lot of the withdrawn product
                if not ledger.has_lot(line.lot_id) or ledger.get_lot(line.lot_id).product_id != withdrawal.product_id:
                    raise NotFoundError("Lot", line.lot_id)
            allocated = sum((line.quantity for line in withdrawal.lines), Decimal(0))
            if allocated != withdrawal.total_quantity:
                raise InvalidAmountError(
                    "total_quantity", withdrawal.total_quantity,
                    f"does not match the {allocated} allocated by withdrawal {withdrawal.id}", limit=allocated
                )
            withdrawals[withdrawal.id] = withdrawal.model_copy(deep=True)
            withdrawals_by_product[withdrawal.product_id].append(withdrawal.id)

        log = TransactionLog(id_generator=self._id_generator, sorter=self._sorter)
        for transaction in snapshot.transactions:
            if transaction.product_id not in products:
                raise NotFoundError("Product", transaction.product_id)
            if transaction.type == TransactionType.ENTRY:
                if not ledger.has_lot(transaction.reference_id) \
                        or ledger.get_lot(transaction.reference_id).product_id != transaction.product_id:
                    raise NotFoundError("Lot", transaction.reference_id)
            if transaction.type == TransactionType.OUTPUT:
                output = withdrawals.get(transaction.reference_id)
                if output is None or output.product_id != transaction.product_id:
                    raise NotFoundError("Withdrawal", transaction.reference_id)
            log.replay(transaction)

        for product_id, product in products.items():
            products[product_id] = self._recalculator.recalculate(product, ledger.list_lots_for(product_id))

        with self._locked_everything():
            # Locks of surviving products are kept so waiting writers stay serialized
            with self._locks_guard:
                self._product_locks = {
                    product_id: self._product_locks.get(product_id) or threading.RLock()
                    for product_id in products
                }
            self._products = products
            self._sku_index = sku_index
            self._withdrawals = withdrawals
            self._withdrawals_by_product = withdrawals_by_product
            self._ledger = ledger
            self._log = log
            self._engine = AllocationEngine(ledger=ledger, id_generator=self._id_generator)

        logger.info(f"Restored snapshot from {snapshot.exported_at}: {len(products)} product(s), "
                    f"{len(snapshot.lots)} lot(s), {len(withdrawals)} withdrawal(s).")
        self._notify_changed()
