#app/api/routers/cart.py
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_state
from app.domain.errors import CheckoutRejectedError, EntityNotFoundError
from app.domain.schemas import CartItemIn, CartOut, CartQuantityIn, CheckoutOut, DiscountIn
from app.services.cart_service import CartService
from app.services.checkout_service import CheckoutService
from app.services.state_service import StateService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(state: StateService = Depends(get_state)):
    return CartService(state)


@router.get("/", response_model=CartOut)
def get_cart(svc: CartService = Depends(get_service)):
    return svc.get_cart()


@router.post("/items", response_model=CartOut)
def add_item(payload: CartItemIn, svc: CartService = Depends(get_service)):
    try:
        return svc.add_to_cart(payload.product_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/items/{product_id}", response_model=CartOut)
def set_quantity(
    product_id: str,
    payload: CartQuantityIn,
    svc: CartService = Depends(get_service),
):
    try:
        return svc.set_quantity(product_id, payload.quantity)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/items/{product_id}", response_model=CartOut)
def remove_item(product_id: str, svc: CartService = Depends(get_service)):
    try:
        return svc.remove_from_cart(product_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/discount", response_model=CartOut)
def set_discount(payload: DiscountIn, svc: CartService = Depends(get_service)):
    try:
        return svc.set_discount(payload.value, payload.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/taxes/{tax_id}/toggle", response_model=CartOut)
def toggle_tax(tax_id: str, svc: CartService = Depends(get_service)):
    try:
        return svc.toggle_tax(tax_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/checkout", response_model=CheckoutOut)
def checkout(state: StateService = Depends(get_state)):
    svc = CheckoutService(state)
    try:
        return svc.checkout()
    except CheckoutRejectedError as e:
        raise HTTPException(status_code=409, detail={"message": str(e), "reason": e.reason})
