# app/services/checkout_service.py
from app.domain.checkout import commit_checkout, rounded_totals, transaction_totals
from app.domain.errors import CheckoutRejectedError
from app.domain.schemas import CheckoutOut
from app.services.cart_service import CartService
from app.services.state_service import StateService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Serwis odpowiedzialny za finalizacje zakupu.
    Separacja od CartService: koszyk tylko zbiera pozycje, tutaj powstaje transakcja.
    """

    def __init__(self, state: StateService):
        self.state = state
        self.cart = CartService(state)

    def checkout(self) -> CheckoutOut:
        """
        Use Case: Finalizacja koszyka.

        1. Sprawdza czy koszyk nie jest pusty i czy stan magazynu wystarcza
        2. Zmniejsza stan produktow z koszyka
        3. Dopisuje transakcje do rejestru
        4. Czysci koszyk, rabat i wybor podatkow
        5. Zapisuje katalog, koszyk i rejestr jednym atomowym zapisem
        """
        # walidacja i commit na tym samym snapshocie katalogu
        with self.state.lock:
            s = self.state.state
            selected = self.cart.selected_taxes(s)

            try:
                result = commit_checkout(
                    cart=s.cart,
                    catalog=s.catalog,
                    discount=s.discount,
                    selected_taxes=selected,
                    ledger=s.transactions,
                )
            except CheckoutRejectedError as e:
                logger.info(f"Finalizacja odrzucona ({e.reason}): {e}")
                raise

            self.state.commit(
                catalog=result.catalog,
                transactions=[*s.transactions, result.transaction],
                cart=result.cart,
                discount=result.discount,
                selected_tax_ids=[],
            )

        logger.info(f"Koszyk sfinalizowany, transakcja {result.transaction.id}")

        t = result.transaction
        return CheckoutOut(transaction=t, totals=rounded_totals(transaction_totals(t)))
