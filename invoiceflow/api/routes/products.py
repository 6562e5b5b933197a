"""Product catalogue endpoints."""

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from invoiceflow.api.dependencies import get_inventory, get_products_store
from invoiceflow.application.dto.requests import (
    CreateProductRequest,
    UpdateProductRequest,
)
from invoiceflow.application.dto.responses import (
    ErrorResponse,
    ProductListResponse,
    ProductResponse,
)
from invoiceflow.core.exceptions import ProductNotFoundError
from invoiceflow.core.interfaces.stores import IProductStore
from invoiceflow.core.services import InventoryService

router = APIRouter(prefix="/api/products", tags=["products"])


@router.get("", response_model=ProductListResponse)
async def list_products(
    store: IProductStore = Depends(get_products_store),
) -> ProductListResponse:
    """List all products by name."""
    products = await store.list_products()
    return ProductListResponse(
        products=[ProductResponse.from_entity(p) for p in products],
        total=len(products),
    )


@router.get("/low-stock", response_model=ProductListResponse)
async def list_low_stock(
    store: IProductStore = Depends(get_products_store),
) -> ProductListResponse:
    """Products at or below their minimum stock."""
    products = await store.list_low_stock()
    return ProductListResponse(
        products=[ProductResponse.from_entity(p) for p in products],
        total=len(products),
    )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_product(
    request: CreateProductRequest,
    service: InventoryService = Depends(get_inventory),
) -> ProductResponse:
    """Add a product."""
    product = await service.create_product(request.to_entity())
    return ProductResponse.from_entity(product)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_product(
    product_id: str,
    store: IProductStore = Depends(get_products_store),
) -> ProductResponse:
    """Get a product by ID."""
    product = await store.get_product(product_id)
    if product is None:
        raise ProductNotFoundError(product_id)
    return ProductResponse.from_entity(product)


@router.patch(
    "/{product_id}",
    response_model=ProductResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_product(
    product_id: str,
    request: UpdateProductRequest,
    service: InventoryService = Depends(get_inventory),
) -> ProductResponse:
    """Edit a product. Sending stock overwrites it as a manual correction."""
    product = await service.update_product(product_id, request.changes())
    return ProductResponse.from_entity(product)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_product(
    product_id: str,
    service: InventoryService = Depends(get_inventory),
) -> Response:
    """Delete a product. Past documents keep their line snapshots."""
    await service.delete_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
