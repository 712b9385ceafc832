# app/api/routers/transactions.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import PlainTextResponse

from app.api.deps import get_state
from app.domain.errors import EntityNotFoundError
from app.domain.schemas import Transaction
from app.services.ledger_service import LedgerService
from app.services.state_service import StateService

router = APIRouter(prefix="/transactions", tags=["transactions"])


def get_service(state: StateService = Depends(get_state)):
    return LedgerService(state)


@router.get("/", response_model=List[Transaction])
def list_transactions(
    month: int | None = Query(None, ge=1, le=12),
    current_week: bool = Query(False),
    svc: LedgerService = Depends(get_service),
):
    """
    Filtry miesiaca (UTC) i biezacego tygodnia lacza sie przez AND.
    """
    return svc.list_transactions(month, current_week)


@router.delete("/", status_code=204)
def clear_ledger(svc: LedgerService = Depends(get_service)):
    svc.clear_ledger()


@router.get("/export", response_class=PlainTextResponse)
def export_transactions(
    month: int | None = Query(None, ge=1, le=12),
    current_week: bool = Query(False),
    svc: LedgerService = Depends(get_service),
):
    return PlainTextResponse(svc.export_csv(month, current_week), media_type="text/csv")


@router.get("/{transaction_id}", response_model=Transaction)
def get_transaction(transaction_id: str, svc: LedgerService = Depends(get_service)):
    try:
        return svc.get_transaction(transaction_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
