import logging
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from app.domain.checkout import (
    ZERO_DISCOUNT,
    commit_checkout,
    compute_totals,
    next_transaction_id,
    quantize_money,
    rounded_totals,
    validate_stock,
)
from app.domain.errors import CheckoutRejectedError
from app.domain.schemas import MAX_MONEY, MAX_QUANTITY, AdjustmentType, Discount, FixedTax
from tests.factories import line, product, tax


def percent(value):
    return Discount(value=Decimal(value), type=AdjustmentType.PERCENTAGE)


def amount(value):
    return Discount(value=Decimal(value), type=AdjustmentType.AMOUNT)


# =============================================================================
# compute_totals
# =============================================================================

class TestComputeTotals:

    def test_subtotal_is_sum_of_price_times_quantity(self):
        cart = [line("a", price="10", quantity=2), line("b", price="5", quantity=3)]

        totals = compute_totals(cart, ZERO_DISCOUNT, [])

        assert totals.subtotal == Decimal("35")
        assert totals.total == Decimal("35")

    def test_empty_cart_gives_zero_totals(self):
        totals = compute_totals([], ZERO_DISCOUNT, [])

        assert totals.subtotal == 0
        assert totals.applied_discount_value == 0
        assert totals.subtotal_after_discount == 0
        assert totals.total_tax_amount == 0
        assert totals.total == 0

    def test_percentage_discount(self):
        totals = compute_totals([line(price="100")], percent("10"), [])

        assert totals.applied_discount_value == Decimal("10")
        assert totals.subtotal_after_discount == Decimal("90")

    def test_amount_tax_applied_after_discount(self):
        totals = compute_totals([line(price="100")], percent("10"), [tax(value="5")])

        assert totals.total_tax_amount == Decimal("5")
        assert totals.total == Decimal("95")

    def test_percentage_tax_uses_subtotal_after_discount(self):
        taxes = [tax(value="10", type="percentage")]

        totals = compute_totals([line(price="100")], amount("10"), taxes)

        assert totals.total_tax_amount == Decimal("9")
        assert totals.total == Decimal("99")

    def test_tax_order_does_not_change_result(self):
        taxes = [tax("t1", value="7.5", type="percentage"), tax("t2", value="2")]
        cart = [line(price="19.99", quantity=3)]

        first = compute_totals(cart, percent("5"), taxes)
        second = compute_totals(cart, percent("5"), list(reversed(taxes)))

        assert first == second

    def test_same_inputs_same_outputs(self):
        cart = [line(price="3.33", quantity=3)]
        taxes = [tax(value="12", type="percentage")]

        assert compute_totals(cart, percent("15"), taxes) == compute_totals(cart, percent("15"), taxes)

    def test_full_precision_until_presentation(self):
        taxes = [tax(value="7.5", type="percentage")]

        totals = compute_totals([line(price="10.01")], ZERO_DISCOUNT, taxes)

        assert totals.total_tax_amount == Decimal("0.75075")
        assert rounded_totals(totals).total_tax_amount == Decimal("0.75")
        assert rounded_totals(totals).total == Decimal("10.76")

    def test_discount_larger_than_subtotal_is_not_clamped(self, caplog):
        with caplog.at_level(logging.WARNING):
            totals = compute_totals([line(price="10")], amount("15"), [])

        assert totals.applied_discount_value == Decimal("15")
        assert totals.subtotal_after_discount == Decimal("-5")
        assert totals.total == Decimal("-5")
        assert "przekracza subtotal" in caplog.text

    def test_legacy_value_type_means_amount(self):
        legacy = FixedTax.model_validate({"id": "t", "name": "Fee", "value": 2, "type": "value"})

        assert legacy.type == AdjustmentType.AMOUNT
        assert compute_totals([line(price="10")], ZERO_DISCOUNT, [legacy]).total == Decimal("12")


def test_quantize_money_rounds_half_up():
    assert quantize_money(Decimal("0.005")) == Decimal("0.01")
    assert quantize_money(Decimal("2.675")) == Decimal("2.68")
    assert str(quantize_money(Decimal("95"))) == "95.00"


def test_quantize_money_keeps_large_values():
    #wiecej cyfr niz domyslna precyzja kontekstu (28)
    assert quantize_money(Decimal("1e27")) == Decimal("1000000000000000000000000000.00")
    assert str(quantize_money(Decimal("123456789012345678901234567890.125"))) == "123456789012345678901234567890.13"


def test_largest_allowed_cart_rounds():
    big = line(price=str(MAX_MONEY), quantity=MAX_QUANTITY)
    vat = tax(value=str(MAX_MONEY), type="percentage")

    totals = rounded_totals(compute_totals([big], percent("100"), [vat]))

    assert totals.subtotal == MAX_MONEY * MAX_QUANTITY
    assert totals.total == Decimal("0.00")


# =============================================================================
# validate_stock
# =============================================================================

class TestValidateStock:

    def test_enough_stock(self):
        assert validate_stock([line(quantity=5)], [product(stock=5)])

    def test_understocked_line(self):
        assert not validate_stock([line(quantity=6)], [product(stock=5)])

    def test_product_missing_from_catalog(self):
        assert not validate_stock([line("ghost")], [product("p1")])

    def test_empty_cart_passes(self):
        assert validate_stock([], [])


# =============================================================================
# commit_checkout
# =============================================================================

class TestCommitCheckout:

    NOW = datetime(2025, 3, 12, 15, 30, tzinfo=timezone.utc)

    def test_valid_checkout(self):
        cart = [line("p1", price="10", quantity=2)]
        catalog = [product("p1", stock=5, price="10")]

        result = commit_checkout(cart, catalog, ZERO_DISCOUNT, [], now=self.NOW)

        assert result.catalog[0].stock == 3
        assert result.transaction.total == compute_totals(cart, ZERO_DISCOUNT, []).total
        assert result.transaction.total == Decimal("20")
        assert result.cart == []
        assert result.discount == Discount(value=0, type=AdjustmentType.AMOUNT)

    def test_products_not_in_cart_are_untouched(self):
        catalog = [product("p1", stock=5), product("p2", stock=7)]

        result = commit_checkout([line("p1")], catalog, ZERO_DISCOUNT, [], now=self.NOW)

        assert [p.stock for p in result.catalog] == [4, 7]
        assert result.catalog[1] is catalog[1]

    def test_transaction_snapshot(self):
        discount = percent("10")
        taxes = [tax(value="5")]
        cart = [line("p1", name="Coffee", price="50", quantity=2)]

        t = commit_checkout(cart, [product(stock=5)], discount, taxes, now=self.NOW).transaction

        assert t.date == self.NOW
        assert t.items[0].name == "Coffee"
        assert t.items[0].total_item_price == Decimal("100")
        assert t.subtotal == Decimal("100")
        assert t.discount == discount
        assert t.applied_discount_value == Decimal("10")
        assert t.total_tax_amount == Decimal("5")
        assert t.total == Decimal("95")

        # pozniejsza zmiana definicji podatku nie zmienia transakcji
        taxes[0].name = "Renamed"
        assert t.applied_fixed_taxes[0].name == "Service"

    def test_inputs_are_not_mutated(self):
        cart = [line("p1", quantity=2)]
        catalog = [product("p1", stock=5)]

        commit_checkout(cart, catalog, ZERO_DISCOUNT, [], now=self.NOW)

        assert catalog[0].stock == 5
        assert len(cart) == 1

    def test_empty_cart_rejected(self):
        with pytest.raises(CheckoutRejectedError) as exc:
            commit_checkout([], [product()], ZERO_DISCOUNT, [])

        assert exc.value.reason == CheckoutRejectedError.EMPTY_CART

    def test_insufficient_stock_rejected(self):
        catalog = [product("p1", stock=1)]

        with pytest.raises(CheckoutRejectedError) as exc:
            commit_checkout([line("p1", quantity=2)], catalog, ZERO_DISCOUNT, [])

        assert exc.value.reason == CheckoutRejectedError.INSUFFICIENT_STOCK
        assert catalog[0].stock == 1

    def test_transaction_id_is_timestamp_in_ms(self):
        t = commit_checkout([line()], [product()], ZERO_DISCOUNT, [], now=self.NOW).transaction

        assert t.id == str(int(self.NOW.timestamp() * 1000))

    def test_transaction_id_stays_unique_and_ordered(self):
        first = commit_checkout([line()], [product()], ZERO_DISCOUNT, [], now=self.NOW).transaction

        second = commit_checkout(
            [line()], [product()], ZERO_DISCOUNT, [], ledger=[first], now=self.NOW
        ).transaction

        assert int(second.id) == int(first.id) + 1


def test_next_transaction_id_ignores_non_numeric_ids():
    now = datetime(2025, 1, 1, tzinfo=timezone.utc)
    legacy = commit_checkout([line()], [product()], ZERO_DISCOUNT, [], now=now).transaction
    legacy = legacy.model_copy(update={"id": "abc"})

    assert next_transaction_id([legacy], now) == str(int(now.timestamp() * 1000))
