# fifo_inventory/api/v1/transactions.py

from fastapi import APIRouter, Depends

from fifo_inventory.api.dependencies import get_inventory_service
from fifo_inventory.core.models.transaction import Transaction
from fifo_inventory.core.models.withdrawal import AllocationLine
from fifo_inventory.services.inventory_service import InventoryService

router = APIRouter()


@router.get(
    "/products/{product_id}/transactions",
    response_model=list[Transaction],
    summary="List a product's stock movements, newest first"
)
def list_product_transactions(
    product_id: str,
    service: InventoryService = Depends(get_inventory_service)
) -> list[Transaction]:
    return service.list_transactions(product_id)


@router.get("/transactions", response_model=list[Transaction], summary="List all stock movements, newest first")
def list_all_transactions(service: InventoryService = Depends(get_inventory_service)) -> list[Transaction]:
    return service.list_all_transactions()


@router.get(
    "/transactions/{transaction_id}/lines",
    response_model=list[AllocationLine],
    summary="FIFO details of a stock movement",
    description="Returns the allocation lines behind an output transaction; empty for entries."
)
def get_transaction_allocation_lines(
    transaction_id: str,
    service: InventoryService = Depends(get_inventory_service)
) -> list[AllocationLine]:
    return service.get_transaction_allocation_lines(transaction_id)
