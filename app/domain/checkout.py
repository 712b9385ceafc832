# app/domain/checkout.py
"""
Silnik finalizacji koszyka.

Czyste funkcje, bez efektow ubocznych:
- compute_totals: subtotal -> rabat -> podatki -> total
- validate_stock: czy stan magazynu pokrywa koszyk
- commit_checkout: nowy katalog, nowa transakcja, pusty koszyk, rabat zerowy

Zapis do magazynu robi StateService, tutaj tylko obliczenia.
"""
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Iterable, List, NamedTuple, Sequence

from app.domain.errors import CheckoutRejectedError
from app.domain.schemas import (
    AdjustmentType,
    CartLine,
    Discount,
    FixedTax,
    Product,
    Totals,
    Transaction,
    TransactionItem,
)
from app.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
CENT = Decimal("0.01")
ZERO_DISCOUNT = Discount(value=ZERO, type=AdjustmentType.AMOUNT)


class CheckoutResult(NamedTuple):
    catalog: List[Product]
    transaction: Transaction
    cart: List[CartLine]
    discount: Discount


def quantize_money(value: Decimal) -> Decimal:
    """Zaokraglenie do 2 miejsc, tylko przy prezentacji."""
    value = Decimal(value)
    #precyzja kontekstu musi objac wszystkie cyfry calkowite + 2 po przecinku
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(CENT, rounding=ROUND_HALF_UP)


def rounded_totals(totals: Totals) -> Totals:
    return Totals(**{name: quantize_money(v) for name, v in totals})


def percentage_of(base: Decimal, percentage: Decimal) -> Decimal:
    return base * percentage / Decimal(100)


def discount_amount(subtotal: Decimal, discount: Discount) -> Decimal:
    if discount.value == 0:
        return ZERO
    if discount.type == AdjustmentType.PERCENTAGE:
        return percentage_of(subtotal, discount.value)
    return discount.value


def tax_amount(base: Decimal, tax: FixedTax) -> Decimal:
    if tax.type == AdjustmentType.PERCENTAGE:
        return percentage_of(base, tax.value)
    return tax.value


def compute_totals(
    cart: Sequence[CartLine],
    discount: Discount,
    selected_taxes: Iterable[FixedTax],
) -> Totals:
    subtotal = sum((line.price * line.quantity for line in cart), ZERO)
    applied_discount = discount_amount(subtotal, discount)

    # rabat nie jest obcinany do subtotalu, wynik moze byc ujemny
    if applied_discount > subtotal:
        logger.warning(
            f"Rabat {applied_discount} przekracza subtotal {subtotal}, "
            f"subtotal po rabacie bedzie ujemny"
        )
    after_discount = subtotal - applied_discount

    total_tax = sum((tax_amount(after_discount, t) for t in selected_taxes), ZERO)

    return Totals(
        subtotal=subtotal,
        applied_discount_value=applied_discount,
        subtotal_after_discount=after_discount,
        total_tax_amount=total_tax,
        total=after_discount + total_tax,
    )


def transaction_totals(transaction: Transaction) -> Totals:
    return Totals(
        subtotal=transaction.subtotal,
        applied_discount_value=transaction.applied_discount_value,
        subtotal_after_discount=transaction.subtotal - transaction.applied_discount_value,
        total_tax_amount=transaction.total_tax_amount,
        total=transaction.total,
    )


def validate_stock(cart: Sequence[CartLine], catalog: Sequence[Product]) -> bool:
    stock_by_id = {p.id: p.stock for p in catalog}

    for line in cart:
        stock = stock_by_id.get(line.id)
        if stock is None or stock < line.quantity:
            logger.info(
                f"Brak wystarczajacego stanu dla produktu {line.id} "
                f"(stan: {stock}, w koszyku: {line.quantity})"
            )
            return False

    return True


def next_transaction_id(ledger: Sequence[Transaction], now: datetime) -> str:
    """Id = znacznik czasu w ms, zawsze wiekszy od ostatniego w rejestrze."""
    candidate = int(now.timestamp() * 1000)

    numeric = [int(t.id) for t in ledger if t.id.isdigit()]
    if numeric:
        candidate = max(candidate, max(numeric) + 1)

    return str(candidate)


def commit_checkout(
    cart: Sequence[CartLine],
    catalog: Sequence[Product],
    discount: Discount,
    selected_taxes: Sequence[FixedTax],
    ledger: Sequence[Transaction] = (),
    now: datetime | None = None,
) -> CheckoutResult:
    #walidacje przed jakimkolwiek efektem
    if not cart:
        raise CheckoutRejectedError(
            CheckoutRejectedError.EMPTY_CART,
            "Dodaj produkty do koszyka przed finalizacja zakupu",
        )

    if not validate_stock(cart, catalog):
        raise CheckoutRejectedError(
            CheckoutRejectedError.INSUFFICIENT_STOCK,
            "Jeden lub wiecej produktow w koszyku nie ma wystarczajacego stanu",
        )

    now = now or datetime.now(timezone.utc)
    totals = compute_totals(cart, discount, selected_taxes)

    quantities = {line.id: line.quantity for line in cart}
    updated_catalog = [
        p.model_copy(update={"stock": p.stock - quantities[p.id]})
        if p.id in quantities
        else p
        for p in catalog
    ]

    # kopia gleboka, transakcja nie zalezy od dalszych zmian koszyka i podatkow
    transaction = Transaction(
        id=next_transaction_id(ledger, now),
        date=now,
        items=[
            TransactionItem(
                id=line.id,
                name=line.name,
                price=line.price,
                quantity=line.quantity,
                total_item_price=line.line_total,
            )
            for line in cart
        ],
        subtotal=totals.subtotal,
        discount=discount.model_copy(),
        applied_discount_value=totals.applied_discount_value,
        applied_fixed_taxes=[t.model_copy(deep=True) for t in selected_taxes],
        total_tax_amount=totals.total_tax_amount,
        total=totals.total,
    )

    logger.info(
        f"Transakcja {transaction.id}: {len(cart)} pozycji, total {quantize_money(totals.total)}"
    )

    return CheckoutResult(
        catalog=updated_catalog,
        transaction=transaction,
        cart=[],
        discount=ZERO_DISCOUNT,
    )
