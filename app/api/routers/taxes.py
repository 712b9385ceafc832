# app/api/routers/taxes.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_state
from app.domain.errors import EntityNotFoundError
from app.domain.schemas import FixedTax, FixedTaxIn, FixedTaxUpdate
from app.services.state_service import StateService
from app.services.tax_service import TaxService

router = APIRouter(prefix="/taxes", tags=["taxes"])


def get_service(state: StateService = Depends(get_state)):
    return TaxService(state)


@router.get("/", response_model=List[FixedTax])
def list_taxes(svc: TaxService = Depends(get_service)):
    return svc.list_taxes()


@router.post("/", response_model=FixedTax, status_code=201)
def add_tax(payload: FixedTaxIn, svc: TaxService = Depends(get_service)):
    return svc.add_tax(payload)


@router.put("/{tax_id}", response_model=FixedTax)
def update_tax(tax_id: str, payload: FixedTaxUpdate, svc: TaxService = Depends(get_service)):
    try:
        return svc.update_tax(tax_id, payload)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{tax_id}", status_code=204)
def delete_tax(tax_id: str, svc: TaxService = Depends(get_service)):
    try:
        svc.delete_tax(tax_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
