# tests/test_cancellation.py
"""
Anulación de facturas y reverso de saldos sobre el estado actual del cliente.
"""
import pytest

from facturafacil.domain import constants
from facturafacil.domain.errors import ConflictError, ValidationError
from facturafacil.domain.models.draft import InvoiceMode
from facturafacil.domain.models.invoice import InvoiceStatus
from facturafacil.domain.services.settlement import cancel_invoice, finalize_invoice, reverse_settlement

REASON = "Error en los datos del cliente"


class TestCancelInvoice:

    def test_paid_in_full_is_a_no_op_on_balances(self, make_customer, make_draft, now):
        customer = make_customer()
        settled = finalize_invoice(make_draft(customer), customer, now=now)

        result = cancel_invoice(settled.invoice, settled.customer, REASON, now=now)

        assert result.invoice.status == InvoiceStatus.CANCELLED
        assert result.invoice.cancelled_at == now
        assert result.invoice.reason_for_status_change == REASON
        assert result.customer.outstanding_balance == 0.0
        assert result.customer.credit_balance == 0.0
        # Los montos del documento no cambian
        assert result.invoice.total_amount == settled.invoice.total_amount

    def test_debt_is_removed(self, make_customer, make_draft, now):
        customer = make_customer()
        settled = finalize_invoice(
            make_draft(customer, prices=(100.0,), payments=[("Efectivo", 60.0)], apply_tax=False),
            customer, now=now,
        )
        assert settled.customer.outstanding_balance == 40.0

        result = cancel_invoice(settled.invoice, settled.customer, REASON)
        assert result.customer.outstanding_balance == 0.0

    def test_auto_credit_is_returned(self, make_customer, make_draft, now):
        customer = make_customer(credit=50.0)
        settled = finalize_invoice(make_draft(customer, payments=[("Efectivo", 356.0)]), customer, now=now)
        assert settled.customer.credit_balance == 0.0

        result = cancel_invoice(settled.invoice, settled.customer, REASON)
        assert result.customer.credit_balance == 50.0

    def test_explicit_and_auto_credit_are_returned(self, make_customer, make_draft, now):
        customer = make_customer(outstanding=10.0, credit=80.0)
        settled = finalize_invoice(
            make_draft(customer, prices=(100.0,), payments=[(constants.CREDIT_METHOD, 30.0), ("Efectivo", 20.0)], apply_tax=False),
            customer, now=now,
        )
        assert [(p.method, p.amount) for p in settled.invoice.payment_methods] == [
            (constants.CREDIT_METHOD, 30.0), ("Efectivo", 20.0), (constants.AUTO_CREDIT_METHOD, 50.0),
        ]
        assert settled.customer.credit_balance == 0.0

        result = cancel_invoice(settled.invoice, settled.customer, REASON)
        assert result.customer.outstanding_balance == 10.0
        assert result.customer.credit_balance == 80.0

    def test_explicit_credit_with_new_debt(self, make_customer, make_draft, now):
        customer = make_customer(credit=30.0)
        settled = finalize_invoice(
            make_draft(customer, prices=(100.0,), payments=[(constants.CREDIT_METHOD, 30.0), ("Efectivo", 20.0)], apply_tax=False),
            customer, now=now,
        )
        assert settled.invoice.amount_due == 50.0
        assert settled.customer.outstanding_balance == 50.0
        assert settled.customer.credit_balance == 0.0

        result = cancel_invoice(settled.invoice, settled.customer, REASON)
        assert result.customer.outstanding_balance == 0.0
        assert result.customer.credit_balance == 30.0

    def test_credited_overpayment_is_withdrawn(self, make_customer, make_draft, now):
        customer = make_customer()
        settled = finalize_invoice(
            make_draft(customer, prices=(100.0,), payments=[("Efectivo", 150.0)], apply_tax=False),
            customer, now=now,
        )
        result = cancel_invoice(settled.invoice, settled.customer, REASON)
        assert result.customer.credit_balance == 0.0

    def test_balances_are_clamped_at_zero(self, make_customer, make_draft, now):
        customer = make_customer()
        settled = finalize_invoice(
            make_draft(customer, prices=(100.0,), payments=[("Efectivo", 150.0)], apply_tax=False),
            customer, now=now,
        )
        # El cliente gastó parte del saldo a favor en otra compra
        current = settled.customer.model_copy(update={"credit_balance": 20.0})

        result = cancel_invoice(settled.invoice, current, REASON)
        assert result.customer.credit_balance == 0.0

    def test_reason_is_required(self, make_customer, make_draft, now):
        customer = make_customer()
        settled = finalize_invoice(make_draft(customer), customer, now=now)
        with pytest.raises(ValidationError) as exc_info:
            cancel_invoice(settled.invoice, settled.customer, "   ")
        assert exc_info.value.errors[0].field == "reasonForStatusChange"

    def test_cannot_cancel_twice(self, make_customer, make_draft, now):
        customer = make_customer()
        settled = finalize_invoice(make_draft(customer), customer, now=now)
        cancelled = cancel_invoice(settled.invoice, settled.customer, REASON)
        with pytest.raises(ConflictError):
            cancel_invoice(cancelled.invoice, cancelled.customer, REASON)

    def test_debt_payment_is_not_cancellable(self, make_customer, make_draft, now):
        customer = make_customer(outstanding=100.0)
        settled = finalize_invoice(
            make_draft(customer, prices=(), payments=[("Efectivo", 60.0)], mode=InvoiceMode.DEBT_PAYMENT),
            customer, now=now,
        )
        with pytest.raises(ValidationError):
            cancel_invoice(settled.invoice, settled.customer, REASON)


class TestReverseAccountMovements:

    def test_debt_payment_with_excess(self, make_customer, make_draft, now):
        customer = make_customer(outstanding=100.0)
        settled = finalize_invoice(
            make_draft(customer, prices=(), payments=[("Efectivo", 150.0)], mode=InvoiceMode.DEBT_PAYMENT),
            customer, now=now,
        )
        restored = reverse_settlement(settled.invoice, settled.customer)
        assert restored.outstanding_balance == 100.0
        assert restored.credit_balance == 0.0

    def test_credit_deposit(self, make_customer, make_draft, now):
        customer = make_customer(outstanding=30.0)
        settled = finalize_invoice(
            make_draft(customer, prices=(), payments=[("Efectivo", 100.0)], mode=InvoiceMode.CREDIT_DEPOSIT),
            customer, now=now,
        )
        restored = reverse_settlement(settled.invoice, settled.customer)
        assert restored.outstanding_balance == 30.0
        assert restored.credit_balance == 0.0
