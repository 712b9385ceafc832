# app/api/routers/health.py
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_state
from app.services.state_service import StateService

router = APIRouter(tags=["health"])


@router.get("/health")
def health(state: StateService = Depends(get_state)):
    if not state.ping():
        raise HTTPException(status_code=503, detail="Magazyn niedostepny")
    return {"status": "ok"}
