# fifo_inventory/api/v1/lots.py

from fastapi import APIRouter, Depends, status

from fifo_inventory.api.dependencies import get_inventory_service
from fifo_inventory.core.models.lot import Lot
from fifo_inventory.core.models.request import LotCreateRequest, LotUpdateRequest
from fifo_inventory.services.inventory_service import InventoryService

router = APIRouter()


@router.post(
    "/products/{product_id}/lots",
    response_model=Lot,
    status_code=status.HTTP_201_CREATED,
    summary="Receive stock into a new lot",
    description="Creates a lot, records an entry transaction and recalculates "
                "the product's current stock and average cost."
)
def add_stock_lot(
    product_id: str,
    request: LotCreateRequest,
    service: InventoryService = Depends(get_inventory_service)
) -> Lot:
    return service.add_stock_lot(
        product_id,
        quantity=request.quantity,
        unit_price=request.unit_price,
        entry_date=request.entry_date,
        notes=request.notes
    )


@router.get("/products/{product_id}/lots", response_model=list[Lot], summary="List a product's lots in FIFO order")
def list_lots(product_id: str, service: InventoryService = Depends(get_inventory_service)) -> list[Lot]:
    return service.list_lots(product_id)


@router.get("/lots/{lot_id}", response_model=Lot, summary="Get a lot")
def get_lot(lot_id: str, service: InventoryService = Depends(get_inventory_service)) -> Lot:
    return service.get_lot(lot_id)


@router.put(
    "/lots/{lot_id}",
    response_model=Lot,
    summary="Edit a lot",
    description="Updates price, date and notes, and optionally the original quantity. "
                "The quantity cannot drop below what withdrawals already consumed."
)
def edit_lot(
    lot_id: str,
    request: LotUpdateRequest,
    service: InventoryService = Depends(get_inventory_service)
) -> Lot:
    return service.edit_lot(
        lot_id,
        unit_price=request.unit_price,
        entry_date=request.entry_date,
        notes=request.notes,
        quantity=request.quantity
    )
