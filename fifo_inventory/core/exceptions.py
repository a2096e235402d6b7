# fifo_inventory/core/exceptions.py
"""
Typed errors raised by the inventory engine.

Every error carries a machine-readable ``code`` class attribute and keeps its
context (ids, amounts) as attributes so callers can build precise messages
without parsing strings. All of them are raised before any state is mutated.

    InventoryError
    +-- NotFoundError                  NOT_FOUND
    +-- DuplicateKeyError              DUPLICATE_KEY
    +-- InvalidAmountError             INVALID_AMOUNT
    +-- QuantityBelowConsumedError     QUANTITY_BELOW_CONSUMED
    +-- InsufficientStockError         INSUFFICIENT_STOCK
    +-- ReferentialIntegrityError      REFERENTIAL_INTEGRITY_VIOLATION
"""

from decimal import Decimal
from typing import Any, Optional


class InventoryError(Exception):
    """Base class for all inventory engine errors."""

    code: str = "INVENTORY_ERROR"

    def context(self) -> dict[str, Any]:
        """Structured details of the failure, keyed by attribute name."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": str(self),
            "context": self.context(),
        }


class NotFoundError(InventoryError):
    """A referenced product, lot, withdrawal or transaction does not exist."""

    code: str = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id}")

    def context(self) -> dict[str, Any]:
        return {"entity": self.entity, "entity_id": self.entity_id}


class DuplicateKeyError(InventoryError):
    """A unique key (a product's SKU, or an entity id on restore) is already taken."""

    code: str = "DUPLICATE_KEY"

    def __init__(self, entity: str, field: str, value: str, existing_id: str):
        self.entity = entity
        self.field = field
        self.value = value
        self.existing_id = existing_id
        super().__init__(f"Another {entity.lower()} with {field} '{value}' already exists ({existing_id})")

    def context(self) -> dict[str, Any]:
        return {"entity": self.entity, "field": self.field, "value": self.value, "existing_id": self.existing_id}


class InvalidAmountError(InventoryError):
    """A quantity or price is out of its allowed range."""

    code: str = "INVALID_AMOUNT"

    def __init__(self, field: str, amount: Decimal, reason: str, limit: Optional[Decimal] = None):
        self.field = field
        self.amount = amount
        self.limit = limit
        super().__init__(f"Invalid {field} ({amount}): {reason}")

    def context(self) -> dict[str, Any]:
        return {"field": self.field, "amount": self.amount, "limit": self.limit}


class QuantityBelowConsumedError(InventoryError):
    """A lot edit would shrink its original quantity below what was already allocated."""

    code: str = "QUANTITY_BELOW_CONSUMED"

    def __init__(self, lot_id: str, requested: Decimal, consumed: Decimal):
        self.lot_id = lot_id
        self.requested = requested
        self.consumed = consumed
        super().__init__(
            f"Cannot reduce quantity of lot {lot_id} to {requested}: "
            f"{consumed} has already been consumed"
        )

    def context(self) -> dict[str, Any]:
        return {"lot_id": self.lot_id, "requested": self.requested, "consumed": self.consumed}


class InsufficientStockError(InventoryError):
    """A withdrawal asks for more than the product currently holds."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, requested: Decimal, available: Decimal):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        self.shortfall = requested - available
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Requested {requested}, only {available} units available"
        )

    def context(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "requested": self.requested,
            "available": self.available,
            "shortfall": self.shortfall,
        }


class ReferentialIntegrityError(InventoryError):
    """A product with transaction history cannot be deleted."""

    code: str = "REFERENTIAL_INTEGRITY_VIOLATION"

    def __init__(self, product_id: str, transaction_count: int):
        self.product_id = product_id
        self.transaction_count = transaction_count
        super().__init__(
            f"Cannot delete product {product_id}: it has {transaction_count} transaction(s) in its history"
        )

    def context(self) -> dict[str, Any]:
        return {"product_id": self.product_id, "transaction_count": self.transaction_count}
