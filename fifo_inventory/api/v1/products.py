# fifo_inventory/api/v1/products.py

from fastapi import APIRouter, Depends, Response, status

from fifo_inventory.api.dependencies import get_inventory_service
from fifo_inventory.core.models.product import Product
from fifo_inventory.core.models.request import ProductCreateRequest, ProductUpdateRequest
from fifo_inventory.services.inventory_service import InventoryService

router = APIRouter()


@router.get("/products", response_model=list[Product], summary="List products sorted by name")
def list_products(service: InventoryService = Depends(get_inventory_service)) -> list[Product]:
    return service.list_products()


@router.post(
    "/products",
    response_model=Product,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    description="Creates a product with zero stock. Fails with DUPLICATE_KEY if the SKU is taken."
)
def create_product(
    request: ProductCreateRequest,
    service: InventoryService = Depends(get_inventory_service)
) -> Product:
    return service.create_product(
        name=request.name,
        sku=request.sku,
        description=request.description,
        units=request.units
    )


@router.get("/products/{product_id}", response_model=Product, summary="Get a product with its current aggregates")
def get_product(product_id: str, service: InventoryService = Depends(get_inventory_service)) -> Product:
    return service.get_product(product_id)


@router.put("/products/{product_id}", response_model=Product, summary="Update a product's display attributes")
def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    service: InventoryService = Depends(get_inventory_service)
) -> Product:
    return service.update_product(
        product_id,
        name=request.name,
        sku=request.sku,
        description=request.description,
        units=request.units
    )


@router.delete(
    "/products/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Only products without any transaction history can be deleted."
)
def delete_product(product_id: str, service: InventoryService = Depends(get_inventory_service)) -> Response:
    service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
