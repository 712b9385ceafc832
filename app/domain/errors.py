# app/domain/errors.py


class EntityNotFoundError(ValueError):
    """Produkt, pozycja koszyka, podatek albo transakcja nie istnieje."""


class CheckoutRejectedError(ValueError):
    """Naruszenie regul biznesowych przy finalizacji, stan nie zostal zmieniony."""

    EMPTY_CART = "empty_cart"
    INSUFFICIENT_STOCK = "insufficient_stock"

    def __init__(self, reason: str, message: str):
        super().__init__(message)
        self.reason = reason
