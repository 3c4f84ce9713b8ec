# tests/test_totals.py
import pytest

from facturafacil.domain.models.invoice import InvoiceItem, PaymentDetails
from facturafacil.domain.money import format_currency, round_money
from facturafacil.domain.services.totals import (
    compute_payment_summary,
    compute_totals,
    discount_percentage_from_value,
    resolve_discount,
)


def _items(*prices):
    return [InvoiceItem(id=str(i), description="x", quantity=1, unit_price=p) for i, p in enumerate(prices)]


class TestComputeTotals:

    def test_tax_on_subtotal(self):
        totals = compute_totals(_items(350.0), 16.0, 0.0, True)
        assert totals.sub_total == 350.0
        assert totals.tax_amount == 56.0
        assert totals.total_amount == 406.0

    def test_discount_applied_before_tax(self):
        totals = compute_totals(_items(60.0, 40.0), 16.0, 10.0, True)
        assert totals.discount_amount == 10.0
        assert totals.tax_amount == pytest.approx(14.4)
        assert totals.total_amount == pytest.approx(104.4)

    def test_sub_cent_tax_is_rounded_to_cents(self):
        totals = compute_totals(_items(0.05), 16.0, 0.0, True)
        assert totals.tax_amount == 0.01
        assert totals.total_amount == 0.06

    def test_tax_disabled(self):
        totals = compute_totals(_items(100.0), 16.0, 0.0, False)
        assert totals.tax_amount == 0.0
        assert totals.total_amount == 100.0

    def test_discount_larger_than_subtotal_does_not_go_negative(self):
        totals = compute_totals(_items(100.0), 16.0, 150.0, True)
        assert totals.tax_amount == 0.0
        assert totals.total_amount == 0.0

    def test_item_total_price_is_derived(self):
        item = InvoiceItem.model_validate({"id": "1", "quantity": 3, "unitPrice": 1.1, "totalPrice": 999})
        assert item.total_price == 3.3
        assert item.model_dump(by_alias=True)["totalPrice"] == 3.3


class TestDiscount:

    def test_value_wins_over_percentage(self):
        assert resolve_discount(200.0, value=15.0, percentage=10.0) == 15.0

    def test_percentage_used_when_no_value(self):
        assert resolve_discount(200.0, percentage=10.0) == 20.0

    def test_no_discount_with_zero_subtotal(self):
        assert resolve_discount(0.0, value=5.0) == 0.0

    def test_percentage_derived_from_value(self):
        assert discount_percentage_from_value(25.0, 200.0) == 12.5
        assert discount_percentage_from_value(25.0, 0.0) == 0.0


class TestPaymentSummary:

    def test_overpayment_gives_negative_amount_due(self):
        payments = [PaymentDetails(method="Efectivo", amount=100.0), PaymentDetails(method="Zelle", amount=50.5)]
        summary = compute_payment_summary(payments, 120.0)
        assert summary.amount_paid == 150.5
        assert summary.amount_due == -30.5


class TestMoney:

    def test_round_money_treats_missing_as_zero(self):
        assert round_money(None) == 0.0
        assert round_money(10.005 + 0.001) == 10.01

    def test_format_currency(self):
        assert format_currency(1234.5) == "Bs. 1,234.50"
