# tests/test_credit_notes.py
"""
Notas de crédito por devolución total y retiros de saldo a favor.
"""
import re

import pytest

from facturafacil.domain import constants
from facturafacil.domain.errors import ConflictError, ValidationError
from facturafacil.domain.models.draft import InvoiceMode
from facturafacil.domain.models.invoice import InvoiceStatus, InvoiceType
from facturafacil.domain.services.credit_notes import (
    confirm_credit_withdrawal,
    issue_credit_note,
    prepare_credit_withdrawal,
)
from facturafacil.domain.services.settlement import cancel_invoice, finalize_invoice

REASON = "Producto defectuoso"


@pytest.fixture
def settled_sale(make_customer, make_draft, now):
    customer = make_customer()
    return finalize_invoice(make_draft(customer, notes="Entrega inmediata"), customer, now=now)


class TestIssueCreditNote:

    def test_cash_refund(self, settled_sale, now):
        original = settled_sale.invoice
        result = issue_credit_note(original, [original], settled_sale.customer, "Efectivo", REASON, now=now)

        note = result.credit_note
        assert re.match(r"^NC-\d{6}$", note.invoice_number)
        assert note.id != original.id
        assert note.type == InvoiceType.RETURN
        assert note.status == InvoiceStatus.ACTIVE
        assert note.original_invoice_id == original.id
        assert note.total_amount == original.total_amount
        assert note.amount_paid == 406.0
        assert [(p.method, p.amount) for p in note.payment_methods] == [("Efectivo", 406.0)]
        assert note.reason_for_status_change == REASON
        assert note.thank_you_message == f"Nota de Crédito aplicada a Factura Nro. {original.invoice_number}"
        assert "Notas Originales: Entrega inmediata" in note.notes

        assert result.original.status == InvoiceStatus.RETURN_PROCESSED
        assert result.original.reason_for_status_change == REASON
        assert result.customer.credit_balance == 0.0
        # La factura original no se modifica en sitio
        assert original.status == InvoiceStatus.ACTIVE

    def test_credit_to_account_refund(self, settled_sale, now):
        original = settled_sale.invoice
        result = issue_credit_note(
            original, [original], settled_sale.customer, constants.CREDIT_TO_ACCOUNT_METHOD, REASON, now=now
        )
        assert result.customer.credit_balance == 406.0

    def test_second_return_is_rejected(self, settled_sale, now):
        original = settled_sale.invoice
        first = issue_credit_note(original, [original], settled_sale.customer, "Efectivo", REASON, now=now)

        with pytest.raises(ConflictError) as exc_info:
            issue_credit_note(original, [original, first.credit_note], first.customer, "Efectivo", REASON, now=now)
        assert first.credit_note.invoice_number in exc_info.value.message

    def test_cancelled_invoice_cannot_be_returned(self, settled_sale, now):
        cancelled = cancel_invoice(settled_sale.invoice, settled_sale.customer, "Error")
        with pytest.raises(ConflictError):
            issue_credit_note(cancelled.invoice, [cancelled.invoice], cancelled.customer, "Efectivo", REASON, now=now)

    def test_credit_note_cannot_be_returned(self, settled_sale, now):
        original = settled_sale.invoice
        note = issue_credit_note(original, [original], settled_sale.customer, "Efectivo", REASON, now=now).credit_note
        with pytest.raises(ValidationError):
            issue_credit_note(note, [note], settled_sale.customer, "Efectivo", REASON, now=now)

    def test_debt_payment_cannot_be_returned(self, make_customer, make_draft, now):
        customer = make_customer(outstanding=50.0)
        settled = finalize_invoice(
            make_draft(customer, prices=(), payments=[("Efectivo", 50.0)], mode=InvoiceMode.DEBT_PAYMENT),
            customer, now=now,
        )
        with pytest.raises(ValidationError):
            issue_credit_note(settled.invoice, [settled.invoice], settled.customer, "Efectivo", REASON, now=now)

    def test_reason_is_required(self, settled_sale, now):
        original = settled_sale.invoice
        with pytest.raises(ValidationError):
            issue_credit_note(original, [original], settled_sale.customer, "Efectivo", "", now=now)


class TestCreditWithdrawal:

    def test_prepare_builds_preview(self, make_customer, company, now):
        customer = make_customer(credit=100.0)
        preview = prepare_credit_withdrawal(customer, 30.0, company=company, now=now)

        assert preview.id.startswith("SYNTHETIC-")
        assert re.match(r"^RETIRO-\d{6}$", preview.invoice_number)
        assert preview.type == InvoiceType.SALE
        assert preview.is_credit_deposit is True
        assert preview.items[0].description == constants.CREDIT_WITHDRAWAL_ITEM
        assert preview.payment_methods[0].method == constants.CREDIT_METHOD
        assert preview.total_amount == 30.0
        assert customer.credit_balance == 100.0

    @pytest.mark.parametrize("amount", [0.0, -5.0, 150.0])
    def test_prepare_rejects_invalid_amounts(self, make_customer, now, amount):
        with pytest.raises(ValidationError):
            prepare_credit_withdrawal(make_customer(credit=100.0), amount, now=now)

    def test_confirm_debits_credit(self, make_customer, now):
        customer = make_customer(credit=100.0)
        result = confirm_credit_withdrawal(customer, 30.0, "Efectivo", "Retiro solicitado por el cliente", now=now)

        note = result.credit_note
        assert re.match(r"^NC-RETIRO-\d{6}$", note.invoice_number)
        assert note.type == InvoiceType.RETURN
        assert note.is_credit_deposit is True
        assert note.original_invoice_id.startswith(f"CW-{customer.id}-")
        assert result.original is None
        assert result.customer.credit_balance == 70.0

    def test_confirm_rejects_credit_to_account(self, make_customer, now):
        with pytest.raises(ValidationError):
            confirm_credit_withdrawal(
                make_customer(credit=100.0), 30.0, constants.CREDIT_TO_ACCOUNT_METHOD, "Retiro", now=now
            )
