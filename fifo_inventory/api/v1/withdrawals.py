# fifo_inventory/api/v1/withdrawals.py

from fastapi import APIRouter, Depends, status

from fifo_inventory.api.dependencies import get_inventory_service
from fifo_inventory.core.models.request import WithdrawalCreateRequest, WithdrawalUpdateRequest
from fifo_inventory.core.models.withdrawal import AllocationLine, Withdrawal
from fifo_inventory.services.inventory_service import InventoryService

router = APIRouter()


@router.post(
    "/products/{product_id}/withdrawals",
    response_model=Withdrawal,
    status_code=status.HTTP_201_CREATED,
    summary="Withdraw stock with FIFO costing",
    description="Consumes the oldest lots first and returns the withdrawal with its "
                "allocation lines and total cost. Fails with INSUFFICIENT_STOCK "
                "without touching any lot if the product holds less than requested."
)
def create_withdrawal(
    product_id: str,
    request: WithdrawalCreateRequest,
    service: InventoryService = Depends(get_inventory_service)
) -> Withdrawal:
    return service.create_withdrawal(
        product_id,
        quantity=request.quantity,
        output_date=request.output_date,
        reference_number=request.reference_number,
        notes=request.notes
    )


@router.get(
    "/products/{product_id}/withdrawals",
    response_model=list[Withdrawal],
    summary="List a product's withdrawals, newest first"
)
def list_withdrawals(product_id: str, service: InventoryService = Depends(get_inventory_service)) -> list[Withdrawal]:
    return service.list_withdrawals(product_id)


@router.get("/withdrawals/{withdrawal_id}", response_model=Withdrawal, summary="Get a withdrawal")
def get_withdrawal(withdrawal_id: str, service: InventoryService = Depends(get_inventory_service)) -> Withdrawal:
    return service.get_withdrawal(withdrawal_id)


@router.patch(
    "/withdrawals/{withdrawal_id}",
    response_model=Withdrawal,
    summary="Edit a withdrawal's reference and notes"
)
def update_withdrawal(
    withdrawal_id: str,
    request: WithdrawalUpdateRequest,
    service: InventoryService = Depends(get_inventory_service)
) -> Withdrawal:
    return service.update_withdrawal(
        withdrawal_id,
        reference_number=request.reference_number,
        notes=request.notes
    )


@router.get(
    "/withdrawals/{withdrawal_id}/lines",
    response_model=list[AllocationLine],
    summary="List a withdrawal's FIFO allocation lines"
)
def list_allocation_lines(
    withdrawal_id: str,
    service: InventoryService = Depends(get_inventory_service)
) -> list[AllocationLine]:
    return service.list_allocation_lines(withdrawal_id)
