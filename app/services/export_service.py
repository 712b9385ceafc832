# app/services/export_service.py
"""
Eksport katalogu i rejestru do CSV oraz parsowanie CSV (import produktow,
ponowny odczyt eksportu rejestru). Samo formatowanie, bez stanu aplikacji.
"""
import csv
import io
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import List, NamedTuple, Sequence

from pydantic import ValidationError

from app.domain.checkout import quantize_money
from app.domain.schemas import AdjustmentType, FixedTax, Product, ProductIn, Transaction
from app.utils.logging import get_logger

logger = get_logger(__name__)

CATALOG_HEADER = ["ID", "Name", "Stock", "Price"]
TRANSACTIONS_HEADER = [
    "ID",
    "Date",
    "Subtotal",
    "Discount Applied",
    "Discount Type",
    "Discount Value",
    "Total Taxes",
    "Total",
    "Items",
    "Taxes",
]


class TransactionRow(NamedTuple):
    id: str
    date: datetime
    subtotal: Decimal
    applied_discount_value: Decimal
    discount_type: AdjustmentType
    discount_value: Decimal
    total_tax_amount: Decimal
    total: Decimal
    items: str
    taxes: str


def _money(value: Decimal) -> str:
    return str(quantize_money(value))


def _write(header: List[str], rows: List[list]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buf.getvalue()


def _describe_tax(tax: FixedTax) -> str:
    if tax.type == AdjustmentType.PERCENTAGE:
        return f"{tax.name} ({tax.value}%)"
    return f"{tax.name} ({_money(tax.value)})"


def catalog_to_csv(products: Sequence[Product]) -> str:
    return _write(
        CATALOG_HEADER,
        [[p.id, p.name, p.stock, _money(p.price)] for p in products],
    )


def transactions_to_csv(transactions: Sequence[Transaction]) -> str:
    rows = []
    for t in transactions:
        items = "; ".join(
            f"{i.name} (x{i.quantity}, {_money(i.price)} unit., item total: {_money(i.total_item_price)})"
            for i in t.items
        )
        taxes = "; ".join(_describe_tax(tax) for tax in t.applied_fixed_taxes)
        rows.append(
            [
                t.id,
                t.date.isoformat(),
                _money(t.subtotal),
                _money(t.applied_discount_value),
                t.discount.type.value,
                _money(t.discount.value),
                _money(t.total_tax_amount),
                _money(t.total),
                items,
                taxes,
            ]
        )
    return _write(TRANSACTIONS_HEADER, rows)


def parse_transactions_csv(text: str) -> List[TransactionRow]:
    reader = csv.reader(io.StringIO(text))
    header = next(reader, None)
    if header != TRANSACTIONS_HEADER:
        raise ValueError("Niepoprawny naglowek CSV rejestru transakcji")

    result = []
    for row in reader:
        if not row:
            continue
        (tid, date, subtotal, applied, dtype, dvalue, taxes_total, total, items, taxes) = row
        result.append(
            TransactionRow(
                id=tid,
                date=datetime.fromisoformat(date),
                subtotal=Decimal(subtotal),
                applied_discount_value=Decimal(applied),
                discount_type=AdjustmentType(dtype),
                discount_value=Decimal(dvalue),
                total_tax_amount=Decimal(taxes_total),
                total=Decimal(total),
                items=items,
                taxes=taxes,
            )
        )
    return result


def parse_products_csv(text: str) -> List[ProductIn]:
    """
    Import wierszy nazwa,stan,cena.
    Wiersze z mniej niz 3 polami albo z blednymi liczbami sa pomijane.
    """
    parsed = []
    for lineno, row in enumerate(csv.reader(io.StringIO(text.strip())), start=1):
        if len(row) < 3:
            logger.info(f"Import: pomijam wiersz {lineno}, za malo pol")
            continue

        name, stock, price = (part.strip() for part in row[:3])
        try:
            parsed.append(ProductIn(name=name, stock=int(stock), price=Decimal(price)))
        except (ValueError, InvalidOperation, ValidationError):
            logger.info(f"Import: pomijam niepoprawny wiersz {lineno}: {row}")

    return parsed
