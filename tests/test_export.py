from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.domain.checkout import ZERO_DISCOUNT, commit_checkout, quantize_money
from app.domain.schemas import AdjustmentType, Discount
from app.services.export_service import (
    CATALOG_HEADER,
    catalog_to_csv,
    parse_products_csv,
    parse_transactions_csv,
    transactions_to_csv,
)
from tests.factories import line, product, tax


def test_catalog_csv():
    csv_text = catalog_to_csv([product("p1", "Coffee", 5, "10"), product("p2", "Tea, green", 2, "3.5")])

    lines = csv_text.splitlines()
    assert lines[0] == ",".join(CATALOG_HEADER)
    assert lines[1] == "p1,Coffee,5,10.00"
    assert lines[2] == 'p2,"Tea, green",2,3.50'


class TestTransactionsCsv:

    @pytest.fixture
    def ledger(self):
        start = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)
        first = commit_checkout(
            [line("p1", "Coffee, large", "3.33", 3)],
            [product("p1", stock=10)],
            Discount(value=Decimal("7.5"), type=AdjustmentType.PERCENTAGE),
            [tax(value="12.5", type="percentage"), tax("t2", "Bag", "0.25")],
            now=start,
        ).transaction
        second = commit_checkout(
            [line("p2", "Tea", "2", 1)],
            [product("p2", stock=1)],
            ZERO_DISCOUNT,
            [],
            ledger=[first],
            now=start + timedelta(hours=1),
        ).transaction
        return [first, second]

    def test_round_trip_keeps_ids_and_totals(self, ledger):
        rows = parse_transactions_csv(transactions_to_csv(ledger))

        assert [r.id for r in rows] == [t.id for t in ledger]
        for row, t in zip(rows, ledger):
            assert row.total == quantize_money(t.total)
            assert row.subtotal == quantize_money(t.subtotal)
            assert row.total_tax_amount == quantize_money(t.total_tax_amount)
            assert row.date == t.date

    def test_items_and_taxes_columns(self, ledger):
        row = parse_transactions_csv(transactions_to_csv(ledger))[0]

        assert row.items == "Coffee, large (x3, 3.33 unit., item total: 9.99)"
        assert row.taxes == "Service (12.5%); Bag (0.25)"
        assert row.discount_type == AdjustmentType.PERCENTAGE
        assert row.discount_value == Decimal("7.50")

    def test_empty_ledger_has_header_only(self):
        assert parse_transactions_csv(transactions_to_csv([])) == []

    def test_wrong_header(self):
        with pytest.raises(ValueError):
            parse_transactions_csv("a,b,c\n1,2,3\n")


class TestParseProductsCsv:

    def test_valid_rows(self):
        rows = parse_products_csv("Coffee,10,4.50\nTea, 3 , 2\n")

        assert [(r.name, r.stock, r.price) for r in rows] == [
            ("Coffee", 10, Decimal("4.50")),
            ("Tea", 3, Decimal("2")),
        ]

    def test_malformed_rows_are_skipped(self):
        text = "\n".join(
            [
                "Name,Stock,Price",
                "Coffee,10,4.50",
                "only,two",
                "Milk,abc,1",
                "Sugar,1,xyz",
                "Salt,-1,1",
                ",1,1",
                "Bread,2,3,extra",
            ]
        )

        rows = parse_products_csv(text)

        assert [r.name for r in rows] == ["Coffee", "Bread"]
