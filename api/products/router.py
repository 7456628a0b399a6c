"""
Product API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from . import schemas, service
from .dependencies import get_store
from .repository import ProductStore

router = APIRouter()


@router.get("/produtos", response_model=list[schemas.ProductResponse])
async def list_products(store: ProductStore = Depends(get_store)) -> list[dict]:
    """
    List every product, newest first.
    """
    return await service.list_all(store)


@router.get("/produtos/{product_id}", response_model=schemas.ProductResponse)
async def get_product(product_id: int, store: ProductStore = Depends(get_store)) -> dict:
    return await service.get(store, product_id)


@router.post(
    "/produtos",
    response_model=schemas.ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_product(
    request: schemas.ProductCreateRequest,
    store: ProductStore = Depends(get_store),
) -> dict:
    return await service.create(store, request.model_dump())


@router.put("/produtos/{product_id}", response_model=schemas.ProductResponse)
async def update_product(
    product_id: int,
    request: schemas.ProductUpdateRequest | None = None,
    store: ProductStore = Depends(get_store),
) -> dict:
    """
    Partial update: only fields sent in the body are changed.

    An empty body only refreshes `updated_at`.
    """
    payload = request.model_dump(exclude_unset=True) if request is not None else {}
    return await service.update(store, product_id, payload)


@router.delete("/produtos/{product_id}", response_model=schemas.DeleteProductResponse)
async def delete_product(product_id: int, store: ProductStore = Depends(get_store)) -> dict:
    deleted = await service.delete(store, product_id)
    return {"deleted": True, "produto": deleted}
