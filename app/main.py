# app/main.py
from fastapi import FastAPI
import uvicorn

from app.api import register_routers
from app.services.state_service import StateService, build_store
from app.utils.logging import get_logger

logger = get_logger(__name__)


def create_app(state: StateService | None = None) -> FastAPI:
    app = FastAPI(
        title="POS Service",
        version="1.0.0",
    )

    #stan wczytany raz, wszystkie akcje ida przez ten sam StateService
    if state is None:
        state = StateService(build_store())
        state.load()

    app.state.pos_state = state
    register_routers(app)

    logger.info("Aplikacja gotowa")
    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
