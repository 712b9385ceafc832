# app/api/__init__.py
from fastapi import FastAPI


def register_routers(app: FastAPI) -> FastAPI:
    from app.api.routers import cart, health, products, taxes, transactions

    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(cart.router)
    app.include_router(taxes.router)
    app.include_router(transactions.router)
    return app
