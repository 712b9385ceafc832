from decimal import Decimal
from typing import List

from app.domain.checkout import ZERO_DISCOUNT, compute_totals, rounded_totals
from app.domain.errors import EntityNotFoundError
from app.domain.schemas import AdjustmentType, CartLine, CartOut, Discount, FixedTax
from app.services.catalog_service import CatalogService
from app.services.state_service import AppState, StateService
from app.services.tax_service import TaxService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Prosta implementacja cqrs dla koszyka
    commands (add, set quantity, remove, discount, toggle tax) modyfikuja stan
    query (get) tylko odczyt
    """

    def __init__(self, state: StateService):
        self.state = state
        self.catalog = CatalogService(state)
        self.taxes = TaxService(state)

    #query - odczyt
    def selected_taxes(self, s: AppState | None = None) -> List[FixedTax]:
        s = s or self.state.state
        by_id = {t.id: t for t in s.fixed_taxes}
        return [by_id[i] for i in s.selected_tax_ids if i in by_id]

    def get_cart(self) -> CartOut:
        #jeden odczyt stanu, wszystkie pola z tej samej wersji
        s = self.state.state
        selected = self.selected_taxes(s)

        #dict przeksztalcany w jsona, sumy zaokraglone do prezentacji
        return CartOut(
            items=list(s.cart),
            discount=s.discount,
            selected_taxes=selected,
            totals=rounded_totals(compute_totals(s.cart, s.discount, selected)),
        )

    def _find_line(self, product_id: str) -> CartLine:
        for line in self.state.state.cart:
            if line.id == product_id:
                return line
        raise EntityNotFoundError(f"Produkt {product_id} nie jest w koszyku")

    #commands
    def add_to_cart(self, product_id: str) -> CartOut:
        with self.state.lock:
            product = self.catalog.get_product(product_id)
            cart = self.state.state.cart

            if any(line.id == product_id for line in cart):
                logger.info(f"Produkt {product_id} juz jest w koszyku, zwiekszam ilosc")
                cart = [
                    line.model_copy(update={"quantity": line.quantity + 1})
                    if line.id == product_id
                    else line
                    for line in cart
                ]
            else:
                logger.info(f"Dodaje nowy produkt {product_id} do koszyka")
                #cena kopiowana, pozniejsza zmiana ceny w katalogu nie zmienia koszyka
                cart = [
                    *cart,
                    CartLine(id=product.id, name=product.name, price=product.price, quantity=1),
                ]

            self.state.commit(cart=cart)
            return self.get_cart()

    def set_quantity(self, product_id: str, quantity: int) -> CartOut:
        if quantity < 1:
            return self.remove_from_cart(product_id)

        with self.state.lock:
            self._find_line(product_id)
            self.state.commit(
                cart=[
                    line.model_copy(update={"quantity": quantity}) if line.id == product_id else line
                    for line in self.state.state.cart
                ]
            )
            logger.info(f"Ilosc produktu {product_id} w koszyku: {quantity}")
            return self.get_cart()

    def remove_from_cart(self, product_id: str) -> CartOut:
        with self.state.lock:
            self._find_line(product_id)
            self.state.commit(
                cart=[line for line in self.state.state.cart if line.id != product_id]
            )
            logger.info(f"Produkt {product_id} usuniety z koszyka")
            return self.get_cart()

    def set_discount(self, value: Decimal | None, type: AdjustmentType) -> CartOut:
        if value is None:
            discount = ZERO_DISCOUNT
            logger.info("Rabat usuniety")
        else:
            if value < 0:
                raise ValueError("Wartosc rabatu nie moze byc ujemna")
            discount = Discount(value=value, type=type)
            logger.info(f"Rabat ustawiony: {value} ({type.value})")

        with self.state.lock:
            self.state.commit(discount=discount)
            return self.get_cart()

    def toggle_tax(self, tax_id: str) -> CartOut:
        with self.state.lock:
            self.taxes.get_tax(tax_id)
            selected = self.state.state.selected_tax_ids

            if tax_id in selected:
                selected = [i for i in selected if i != tax_id]
            else:
                selected = [*selected, tax_id]

            self.state.commit(selected_tax_ids=selected)
            return self.get_cart()
