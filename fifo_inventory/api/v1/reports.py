# fifo_inventory/api/v1/reports.py

from fastapi import APIRouter, Depends, Response, status

from fifo_inventory.api.dependencies import get_inventory_service
from fifo_inventory.core.models.response import InventoryValuationResponse
from fifo_inventory.core.models.snapshot import InventorySnapshot
from fifo_inventory.services.inventory_service import InventoryService

router = APIRouter()


@router.get(
    "/reports/valuation",
    response_model=InventoryValuationResponse,
    summary="Stock on hand and its FIFO value per product"
)
def inventory_valuation(service: InventoryService = Depends(get_inventory_service)) -> InventoryValuationResponse:
    return service.inventory_valuation()


@router.get("/snapshot", response_model=InventorySnapshot, summary="Export the full inventory state")
def export_snapshot(service: InventoryService = Depends(get_inventory_service)) -> InventorySnapshot:
    return service.export_snapshot()


@router.put(
    "/snapshot",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Restore the full inventory state",
    description="Replaces all products, lots, withdrawals and transactions. Aggregates "
                "are recomputed from the restored lots. A rejected snapshot changes nothing."
)
def restore_snapshot(
    snapshot: InventorySnapshot,
    service: InventoryService = Depends(get_inventory_service)
) -> Response:
    service.restore_snapshot(snapshot)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
