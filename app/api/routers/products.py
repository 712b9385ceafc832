# app/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from app.api.deps import get_state
from app.domain.errors import EntityNotFoundError
from app.domain.schemas import Product, ProductIn, ProductUpdate, ProductImportIn, ProductImportOut
from app.services.catalog_service import CatalogService
from app.services.state_service import StateService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(state: StateService = Depends(get_state)):
    return CatalogService(state)


@router.get("/", response_model=List[Product])
def list_products(
    search: str | None = Query(None),
    limit: int | None = Query(None, gt=0),
    svc: CatalogService = Depends(get_service),
):
    return svc.list_products(search, limit)


@router.post("/", response_model=Product, status_code=201)
def add_product(payload: ProductIn, svc: CatalogService = Depends(get_service)):
    return svc.add_product(payload)


@router.delete("/", status_code=204)
def clear_catalog(svc: CatalogService = Depends(get_service)):
    svc.clear_catalog()


@router.post("/import", response_model=ProductImportOut)
def import_products(payload: ProductImportIn, svc: CatalogService = Depends(get_service)):
    imported = svc.import_products(payload.csv)
    return ProductImportOut(imported=len(imported), products=imported)


@router.get("/export", response_class=PlainTextResponse)
def export_products(svc: CatalogService = Depends(get_service)):
    return PlainTextResponse(svc.export_csv(), media_type="text/csv")


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: str, svc: CatalogService = Depends(get_service)):
    try:
        return svc.get_product(product_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: str,
    payload: ProductUpdate,
    svc: CatalogService = Depends(get_service),
):
    try:
        return svc.update_product(product_id, payload)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{product_id}", status_code=204)
def delete_product(product_id: str, svc: CatalogService = Depends(get_service)):
    try:
        svc.delete_product(product_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
