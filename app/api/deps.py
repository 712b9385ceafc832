# app/api/deps.py
from fastapi import Request

from app.services.state_service import StateService


def get_state(request: Request) -> StateService:
    #jeden StateService na proces, tworzony w create_app
    return request.app.state.pos_state
