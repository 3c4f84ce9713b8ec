# facturafacil/domain/services/credit_notes.py
"""
Generación de notas de crédito (devolución total de una factura) y de retiros
de saldo a favor.
"""
import logging
import uuid
from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from facturafacil.domain import constants
from facturafacil.domain.errors import ConflictError, FieldError, NotFoundError, ValidationError
from facturafacil.domain.models.customer import CompanyDetails, CustomerDetails
from facturafacil.domain.models.invoice import (
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    InvoiceType,
    PaymentDetails,
)
from facturafacil.domain.money import MONEY_EPSILON, format_currency, round_money
from facturafacil.domain.services.ledger import CustomerLedger
from facturafacil.domain.services.numbering import epoch_millis, generate_document_number
from facturafacil.domain.services.settlement import require_reason

logger = logging.getLogger(__name__)


class CreditNoteResult(BaseModel):
    credit_note: Invoice
    original: Optional[Invoice] = None
    customer: Optional[CustomerDetails] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def find_existing_return(original: Invoice, invoices: Iterable[Invoice]) -> Optional[Invoice]:
    for invoice in invoices:
        if invoice.type == InvoiceType.RETURN and invoice.original_invoice_id == original.id:
            return invoice
    return None


def ensure_returnable(original: Invoice, invoices: Iterable[Invoice]) -> None:
    if original.type != InvoiceType.SALE:
        raise ValidationError(f"El documento {original.invoice_number} es una nota de crédito y no admite devolución.")
    if original.is_account_movement:
        raise ValidationError(
            f"El documento {original.invoice_number} es un abono o depósito a cuenta y no admite devolución."
        )
    if original.status == InvoiceStatus.CANCELLED:
        raise ConflictError(f"La factura {original.invoice_number} está anulada.")

    existing = find_existing_return(original, invoices)
    if existing is not None or original.status == InvoiceStatus.RETURN_PROCESSED:
        number = existing.invoice_number if existing is not None else "desconocida"
        raise ConflictError(
            f"La factura {original.invoice_number} ya tiene una nota de crédito procesada ({number})."
        )


def _require_refund_method(refund_method: Optional[str]) -> str:
    refund_method = (refund_method or "").strip()
    if not refund_method:
        raise ValidationError(
            "Seleccione el método de reintegro.",
            [FieldError(field="refundMethod", message="El método de reintegro es obligatorio.")],
        )
    return refund_method


def issue_credit_note(
    original: Invoice,
    invoices: Iterable[Invoice],
    customer: Optional[CustomerDetails],
    refund_method: str,
    reason: str,
    refund_reference: Optional[str] = None,
    cashier_number: Optional[str] = None,
    salesperson: Optional[str] = None,
    now: Optional[datetime] = None,
    credit_note_id: Optional[str] = None,
) -> CreditNoteResult:
    """
    Emite una nota de crédito por el total de `original`.

    La nota copia los montos de la factura, se paga con una sola línea por el
    total en `refund_method` y marca la factura como `return_processed`. Si el
    reintegro es "Crédito a Cuenta Cliente" el total pasa al saldo a favor.
    """
    now = now or datetime.now()
    ensure_returnable(original, invoices)
    refund_method = _require_refund_method(refund_method)
    reason = require_reason(reason, "Por favor, ingrese el motivo de la devolución.")

    original_notes = f" Notas Originales: {original.notes}" if original.notes else ""
    credit_note = original.model_copy(deep=True, update={
        "id": credit_note_id or str(uuid.uuid4()),
        "invoice_number": generate_document_number(constants.CREDIT_NOTE_PREFIX, now),
        "date": now,
        "type": InvoiceType.RETURN,
        "original_invoice_id": original.id,
        "status": InvoiceStatus.ACTIVE,
        "payment_methods": [PaymentDetails(
            method=refund_method,
            amount=original.total_amount,
            reference=refund_reference,
        )],
        "amount_paid": original.total_amount,
        "amount_due": 0.0,
        "applied_to_debt": 0.0,
        "cashier_number": cashier_number or original.cashier_number,
        "salesperson": salesperson or original.salesperson,
        "thank_you_message": f"Nota de Crédito aplicada a Factura Nro. {original.invoice_number}",
        "notes": f"Esta nota de crédito anula o rectifica la factura Nro. {original.invoice_number}.{original_notes}",
        "overpayment_amount": None,
        "overpayment_handling": None,
        "change_refund_payment_methods": None,
        "cancelled_at": None,
        "reason_for_status_change": reason,
    })

    updated_original = original.model_copy(update={
        "status": InvoiceStatus.RETURN_PROCESSED,
        "reason_for_status_change": reason,
    })

    updated_customer = customer
    if refund_method == constants.CREDIT_TO_ACCOUNT_METHOD:
        if customer is None:
            raise NotFoundError(
                f"No se encontró el cliente de la factura {original.invoice_number} para abonar el saldo a favor."
            )
        ledger = CustomerLedger.of(customer)
        ledger.add_credit(original.total_amount)
        updated_customer = ledger.apply_to(customer)

    logger.info(
        f"[{credit_note.invoice_number}] Nota de crédito emitida para la factura {original.invoice_number} "
        f"por {format_currency(original.total_amount)}. Reintegro: {refund_method}"
    )
    return CreditNoteResult(credit_note=credit_note, original=updated_original, customer=updated_customer)


def _validate_withdrawal_amount(customer: CustomerDetails, amount: float) -> float:
    amount = round_money(amount)
    if amount <= 0:
        raise ValidationError(
            "El monto a retirar debe ser mayor que cero.",
            [FieldError(field="amount", message="Monto inválido")],
        )
    if amount > round_money(customer.credit_balance) + MONEY_EPSILON:
        raise ValidationError(
            f"El monto a retirar excede el saldo a favor disponible ({format_currency(customer.credit_balance)}).",
            [FieldError(field="amount", message="Saldo insuficiente")],
        )
    return amount


def prepare_credit_withdrawal(
    customer: CustomerDetails,
    amount: float,
    company: Optional[CompanyDetails] = None,
    now: Optional[datetime] = None,
) -> Invoice:
    """
    Plantilla de vista previa para un retiro de saldo a favor. No se persiste
    ni modifica saldos.
    """
    now = now or datetime.now()
    amount = _validate_withdrawal_amount(customer, amount)
    millis = epoch_millis(now)
    return Invoice(
        id=f"{constants.SYNTHETIC_ID_PREFIX}-{millis}",
        invoice_number=generate_document_number(constants.WITHDRAWAL_PREVIEW_PREFIX, now),
        date=now,
        type=InvoiceType.SALE,
        is_credit_deposit=True,
        company_details=company,
        customer_details=customer,
        items=[InvoiceItem(id=str(uuid.uuid4()), description=constants.CREDIT_WITHDRAWAL_ITEM, quantity=1, unit_price=amount)],
        payment_methods=[PaymentDetails(method=constants.CREDIT_METHOD, amount=amount)],
        sub_total=amount,
        total_amount=amount,
        amount_paid=amount,
        notes=f"Retiro de saldo a favor por {format_currency(amount)}.",
        thank_you_message="",
    )


def confirm_credit_withdrawal(
    customer: CustomerDetails,
    amount: float,
    refund_method: str,
    reason: str,
    refund_reference: Optional[str] = None,
    company: Optional[CompanyDetails] = None,
    cashier_number: Optional[str] = None,
    salesperson: Optional[str] = None,
    now: Optional[datetime] = None,
    credit_note_id: Optional[str] = None,
) -> CreditNoteResult:
    """
    Registra el retiro de saldo a favor como nota de crédito (`NC-RETIRO-`) y
    descuenta el monto del saldo actual del cliente.
    """
    now = now or datetime.now()
    amount = _validate_withdrawal_amount(customer, amount)
    refund_method = _require_refund_method(refund_method)
    if refund_method == constants.CREDIT_TO_ACCOUNT_METHOD:
        raise ValidationError(
            "Un retiro de saldo a favor no puede reintegrarse como crédito a cuenta.",
            [FieldError(field="refundMethod", message="Método de reintegro no permitido")],
        )
    reason = require_reason(reason, "Por favor, ingrese el motivo del retiro.")

    credit_note = Invoice(
        id=credit_note_id or str(uuid.uuid4()),
        invoice_number=generate_document_number(constants.WITHDRAWAL_NOTE_PREFIX, now),
        date=now,
        type=InvoiceType.RETURN,
        original_invoice_id=f"{constants.WITHDRAWAL_LINK_PREFIX}-{customer.id}-{epoch_millis(now)}",
        is_credit_deposit=True,
        company_details=company,
        customer_details=customer,
        items=[InvoiceItem(id=str(uuid.uuid4()), description=constants.CREDIT_WITHDRAWAL_ITEM, quantity=1, unit_price=amount)],
        payment_methods=[PaymentDetails(method=refund_method, amount=amount, reference=refund_reference)],
        sub_total=amount,
        total_amount=amount,
        amount_paid=amount,
        cashier_number=cashier_number,
        salesperson=salesperson,
        notes=f"Retiro de saldo a favor por {format_currency(amount)}.",
        thank_you_message="",
        reason_for_status_change=reason,
    )

    ledger = CustomerLedger.of(customer)
    ledger.use_credit(amount)
    updated_customer = ledger.apply_to(customer)

    logger.info(
        f"[{credit_note.invoice_number}] Retiro de saldo a favor de {format_currency(amount)} "
        f"para el cliente {customer.rif}. Saldo restante: {format_currency(updated_customer.credit_balance)}"
    )
    return CreditNoteResult(credit_note=credit_note, original=None, customer=updated_customer)
