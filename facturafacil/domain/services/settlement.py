# facturafacil/domain/services/settlement.py
"""
Motor de liquidación de documentos y conciliación de saldos de clientes.

`finalize_invoice` convierte un borrador en un documento definitivo y calcula
los nuevos saldos del cliente; `cancel_invoice` / `reverse_settlement`
deshacen ese efecto sobre los saldos *actuales* del cliente.

Ninguna función modifica sus argumentos: se devuelven copias nuevas de la
factura y del cliente, y toda validación ocurre antes de producirlas.
"""
import logging
import uuid
from datetime import datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from facturafacil.domain import constants
from facturafacil.domain.errors import ConflictError, FieldError, ValidationError
from facturafacil.domain.models.customer import CompanyDetails, CustomerDetails
from facturafacil.domain.models.draft import InvoiceDraft, InvoiceMode, OverpaymentChoice
from facturafacil.domain.models.invoice import (
    Invoice,
    InvoiceItem,
    InvoiceStatus,
    InvoiceType,
    OverpaymentHandling,
    PaymentDetails,
)
from facturafacil.domain.money import MONEY_EPSILON, format_currency, round_money
from facturafacil.domain.services.ledger import CustomerLedger
from facturafacil.domain.services.numbering import generate_document_number
from facturafacil.domain.services.totals import (
    compute_payment_summary,
    compute_sub_total,
    compute_totals,
    resolve_discount,
)

logger = logging.getLogger(__name__)

_CUSTOMER_FIELD_LABELS = {"name": "Nombre", "rif": "RIF/Cédula", "address": "Dirección"}


class SettlementResult(BaseModel):
    invoice: Invoice
    customer: CustomerDetails
    is_new_customer: bool = False

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReversalResult(BaseModel):
    invoice: Invoice
    customer: CustomerDetails

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Validaciones previas
# ---------------------------------------------------------------------------

def _validate_draft(draft: InvoiceDraft) -> None:
    errors: List[FieldError] = []
    is_normal = draft.mode == InvoiceMode.NORMAL

    if is_normal:
        if not draft.items:
            errors.append(FieldError(field="items", message="Debe añadir al menos un artículo al documento."))
        for i, item in enumerate(draft.items):
            if not (item.description or "").strip():
                errors.append(FieldError(field=f"items.{i}.description", message="La descripción es requerida."))
            if item.quantity <= 0:
                errors.append(FieldError(field=f"items.{i}.quantity", message="La cantidad debe ser mayor que 0."))
            if item.unit_price < 0:
                errors.append(FieldError(field=f"items.{i}.unitPrice", message="El precio unitario no puede ser negativo."))

        if draft.apply_tax and not 0 <= draft.tax_rate <= 100:
            errors.append(FieldError(field="taxRate", message="La tasa de IVA debe estar entre 0 y 100."))
        if draft.apply_discount:
            if draft.discount_value is not None and draft.discount_value < 0:
                errors.append(FieldError(field="discountValue", message="El descuento no puede ser negativo."))
            if draft.discount_percentage is not None and not 0 <= draft.discount_percentage <= 100:
                errors.append(FieldError(field="discountPercentage", message="El porcentaje de descuento debe estar entre 0 y 100."))

    if not draft.payment_methods:
        errors.append(FieldError(field="paymentMethods", message="Debe añadir al menos un método de pago."))
    for i, payment in enumerate(draft.payment_methods):
        if not (payment.method or "").strip():
            errors.append(FieldError(field=f"paymentMethods.{i}.method", message="El método de pago es requerido."))
        elif payment.method in constants.CREDIT_METHODS:
            # El saldo a favor explícito se valida contra el cliente más adelante
            if not is_normal or payment.method == constants.AUTO_CREDIT_METHOD:
                errors.append(FieldError(
                    field=f"paymentMethods.{i}.method",
                    message="El saldo a favor solo puede seleccionarse manualmente en facturas de venta.",
                ))
        elif payment.amount <= 0:
            errors.append(FieldError(field=f"paymentMethods.{i}.amount", message="El monto debe ser mayor que 0."))

    if draft.apply_warranty and draft.warranty_duration != constants.NO_WARRANTY \
            and not (draft.warranty_text or "").strip():
        errors.append(FieldError(
            field="warrantyText",
            message="El texto de la garantía es requerido si se aplica una garantía.",
        ))

    if errors:
        raise ValidationError("El documento contiene datos inválidos.", errors)


def _resolve_customer(draft: InvoiceDraft, stored: Optional[CustomerDetails]) -> Tuple[CustomerDetails, bool]:
    """Retorna el cliente a liquidar y si fue creado en esta operación."""
    if stored is not None and stored.is_registered:
        return stored, False

    if draft.mode == InvoiceMode.DEBT_PAYMENT:
        raise ValidationError(
            "Debe seleccionar un cliente registrado para registrar un abono a deuda.",
            [FieldError(field="customerDetails.id", message="Cliente requerido")],
        )

    details = draft.customer_details
    missing = [f for f in ("name", "rif", "address") if not (getattr(details, f) or "").strip()]
    if missing:
        raise ValidationError(
            "Datos incompletos del cliente: complete nombre, RIF y dirección para el nuevo cliente.",
            [FieldError(field=f"customerDetails.{f}", message=f"{_CUSTOMER_FIELD_LABELS[f]} requerido") for f in missing],
        )

    new_customer = details.model_copy(update={
        "id": str(uuid.uuid4()),
        "name": details.name.strip(),
        "rif": details.rif.strip(),
        "address": details.address.strip(),
        "outstanding_balance": 0.0,
        "credit_balance": 0.0,
    })
    logger.info(f"[{new_customer.rif}] Nuevo cliente registrado al facturar: {new_customer.name}")
    return new_customer, True


def validate_explicit_credit(payments: List[PaymentDetails], available_credit: float) -> float:
    """
    Valida las líneas "Saldo a Favor" de una venta contra el saldo disponible.
    Retorna el total de saldo a favor utilizado.
    """
    errors: List[FieldError] = []
    total_used = 0.0
    for i, payment in enumerate(payments):
        if payment.method != constants.CREDIT_METHOD:
            continue
        if payment.amount < 0:
            errors.append(FieldError(
                field=f"paymentMethods.{i}.amount",
                message="Monto de saldo a favor no puede ser negativo.",
            ))
        elif payment.amount > available_credit + MONEY_EPSILON:
            errors.append(FieldError(
                field=f"paymentMethods.{i}.amount",
                message=f"No puede usar más de {format_currency(available_credit)} de saldo.",
            ))
        total_used += payment.amount

    total_used = round_money(total_used)
    if total_used > available_credit + MONEY_EPSILON:
        errors.append(FieldError(
            field="paymentMethods",
            message=(f"El total de saldo a favor utilizado ({format_currency(total_used)}) "
                     f"excede el disponible ({format_currency(available_credit)})."),
        ))
    if errors:
        raise ValidationError("Error de Saldo a Favor.", errors)
    return total_used


# ---------------------------------------------------------------------------
# Liquidación por modo
# ---------------------------------------------------------------------------

def _settle_sale(draft: InvoiceDraft, ledger: CustomerLedger, explicit_credit: float) -> dict:
    sub_total = compute_sub_total(draft.items)
    discount = resolve_discount(sub_total, draft.discount_value, draft.discount_percentage) if draft.apply_discount else 0.0
    totals = compute_totals(draft.items, draft.tax_rate, discount, draft.apply_tax)
    total = totals.total_amount

    # 1. Saldo a favor explícito
    ledger.use_credit(explicit_credit)
    paid_excluding_credit = round_money(sum(
        p.amount for p in draft.payment_methods if p.method != constants.CREDIT_METHOD
    ))
    payment_methods = [p.model_copy() for p in draft.payment_methods]
    extra_notes: List[str] = []

    # 2. Saldo a favor automático para cubrir el faltante
    shortfall = round_money(total - (paid_excluding_credit + explicit_credit))
    auto_credit = 0.0
    if shortfall > MONEY_EPSILON and ledger.credit_balance > MONEY_EPSILON:
        auto_credit = round_money(min(shortfall, ledger.credit_balance))
        ledger.use_credit(auto_credit)
        payment_methods.append(PaymentDetails(
            method=constants.AUTO_CREDIT_METHOD,
            amount=auto_credit,
            reference="Aplicado automáticamente",
        ))
        extra_notes.append(f"Se aplicó automáticamente {format_currency(auto_credit)} del saldo a favor del cliente.")

    final_amount_paid = round_money(paid_excluding_credit + explicit_credit + auto_credit)
    net = round_money(total - final_amount_paid)

    fields = {
        "items": [item.model_copy() for item in draft.items],
        "payment_methods": payment_methods,
        "sub_total": totals.sub_total,
        "discount_value": totals.discount_amount,
        "tax_rate": draft.tax_rate if draft.apply_tax else 0.0,
        "tax_amount": totals.tax_amount,
        "total_amount": total,
        "amount_paid": final_amount_paid,
        "amount_due": 0.0,
        "extra_notes": extra_notes,
    }

    if net < -MONEY_EPSILON:
        overpayment = round_money(-net)
        fields["overpayment_amount"] = overpayment
        if draft.overpayment_handling_choice == OverpaymentChoice.REFUND_NOW:
            refund_lines = [p.model_copy() for p in draft.change_refund_payment_methods]
            line_errors = [
                FieldError(
                    field=f"changeRefundPaymentMethods.{i}.amount",
                    message="El monto del vuelto para cada método debe ser positivo.",
                )
                for i, refund in enumerate(refund_lines)
                if refund.amount <= 0
            ]
            if line_errors:
                raise ValidationError("El documento contiene datos inválidos.", line_errors)
            refunded = round_money(sum(p.amount for p in refund_lines))
            if not refund_lines or abs(refunded - overpayment) > constants.REFUND_TOLERANCE:
                raise ValidationError(
                    f"El monto del vuelto procesado ({format_currency(refunded)}) no coincide "
                    f"con el sobrepago ({format_currency(overpayment)}).",
                    [FieldError(field="changeRefundPaymentMethods", message="El total del vuelto debe igualar el sobrepago.")],
                )
            fields["overpayment_handling"] = OverpaymentHandling.REFUNDED
            fields["change_refund_payment_methods"] = refund_lines
        else:
            ledger.add_credit(overpayment)
            fields["overpayment_handling"] = OverpaymentHandling.CREDITED_TO_ACCOUNT
    elif net > MONEY_EPSILON:
        ledger.add_debt(net)
        fields["amount_due"] = net

    return fields


def _settle_debt_payment(draft: InvoiceDraft, ledger: CustomerLedger) -> dict:
    outstanding = round_money(ledger.outstanding_balance)
    if outstanding <= MONEY_EPSILON:
        raise ValidationError(
            "El cliente no tiene deuda pendiente.",
            [FieldError(field="customerDetails.outstandingBalance", message="Sin deuda pendiente")],
        )

    items = [InvoiceItem(id=str(uuid.uuid4()), description=constants.DEBT_PAYMENT_ITEM, quantity=1, unit_price=outstanding)]
    totals = compute_totals(items, 0.0, 0.0, False)
    summary = compute_payment_summary(draft.payment_methods, totals.total_amount)

    applied = ledger.pay_debt(summary.amount_paid)
    excess = round_money(summary.amount_paid - applied)

    fields = {
        "items": items,
        "payment_methods": [p.model_copy() for p in draft.payment_methods],
        "sub_total": totals.sub_total,
        "total_amount": totals.total_amount,
        "amount_paid": summary.amount_paid,
        "amount_due": max(0.0, summary.amount_due),
        "applied_to_debt": applied,
        "default_notes": f"Abono a deuda pendiente por {format_currency(outstanding)}",
        "default_thank_you": constants.DEBT_PAYMENT_THANK_YOU,
        "extra_notes": [],
    }
    if excess > MONEY_EPSILON:
        # Lo pagado por encima de la deuda queda como saldo a favor
        ledger.add_credit(excess)
        fields["overpayment_amount"] = excess
        fields["overpayment_handling"] = OverpaymentHandling.CREDITED_TO_ACCOUNT
        fields["extra_notes"].append(f"Excedente de {format_currency(excess)} abonado al saldo a favor.")
    return fields


def _settle_credit_deposit(draft: InvoiceDraft, ledger: CustomerLedger) -> dict:
    deposited = compute_payment_summary(draft.payment_methods, 0.0).amount_paid
    items = [InvoiceItem(id=str(uuid.uuid4()), description=constants.CREDIT_DEPOSIT_ITEM, quantity=1, unit_price=deposited)]
    totals = compute_totals(items, 0.0, 0.0, False)

    # El depósito cancela primero la deuda existente
    applied = ledger.pay_debt(deposited)
    ledger.add_credit(round_money(deposited - applied))

    extra_notes = []
    if applied > 0:
        extra_notes.append(f"Se abonaron {format_currency(applied)} a la deuda pendiente.")
    return {
        "items": items,
        "payment_methods": [p.model_copy() for p in draft.payment_methods],
        "sub_total": totals.sub_total,
        "total_amount": totals.total_amount,
        "amount_paid": deposited,
        "amount_due": 0.0,
        "applied_to_debt": applied,
        "default_notes": f"Depósito a cuenta cliente por {format_currency(deposited)}.",
        "default_thank_you": constants.CREDIT_DEPOSIT_THANK_YOU,
        "extra_notes": extra_notes,
    }


_PREFIX_BY_MODE = {
    InvoiceMode.NORMAL: constants.SALE_PREFIX,
    InvoiceMode.DEBT_PAYMENT: constants.DEBT_PAYMENT_PREFIX,
    InvoiceMode.CREDIT_DEPOSIT: constants.CREDIT_DEPOSIT_PREFIX,
}


def finalize_invoice(
    draft: InvoiceDraft,
    customer: Optional[CustomerDetails],
    company: Optional[CompanyDetails] = None,
    invoice_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> SettlementResult:
    """
    Liquida un borrador. `customer` es el cliente ya registrado (con sus saldos
    actuales) o None si no se encontró; en ese caso se registra uno nuevo con
    los datos del borrador.

    Lanza `ValidationError` sin producir ningún resultado si algo no cuadra.
    """
    now = now or datetime.now()
    _validate_draft(draft)
    resolved, is_new = _resolve_customer(draft, customer)
    ledger = CustomerLedger.of(resolved)

    if draft.mode == InvoiceMode.DEBT_PAYMENT:
        fields = _settle_debt_payment(draft, ledger)
    elif draft.mode == InvoiceMode.CREDIT_DEPOSIT:
        fields = _settle_credit_deposit(draft, ledger)
    else:
        explicit_credit = validate_explicit_credit(draft.payment_methods, ledger.credit_balance)
        fields = _settle_sale(draft, ledger, explicit_credit)

    extra_notes = fields.pop("extra_notes")
    default_notes = fields.pop("default_notes", None)
    default_thank_you = fields.pop("default_thank_you", constants.DEFAULT_THANK_YOU_MESSAGE)
    notes = [n for n in [(draft.notes or "").strip() or default_notes] + extra_notes if n]

    invoice = Invoice(
        id=invoice_id or str(uuid.uuid4()),
        invoice_number=(draft.invoice_number or "").strip() or generate_document_number(_PREFIX_BY_MODE[draft.mode], now),
        date=draft.date or now,
        type=InvoiceType.SALE,
        is_debt_payment=draft.mode == InvoiceMode.DEBT_PAYMENT,
        is_credit_deposit=draft.mode == InvoiceMode.CREDIT_DEPOSIT,
        status=InvoiceStatus.ACTIVE,
        company_details=company,
        customer_details=resolved,
        cashier_number=draft.cashier_number,
        salesperson=draft.salesperson,
        notes="\n".join(notes) or None,
        thank_you_message=draft.thank_you_message or default_thank_you,
        warranty_text=draft.warranty_text if draft.apply_warranty else None,
        **fields,
    )
    settled_customer = ledger.apply_to(resolved)

    logger.info(
        f"[{invoice.invoice_number}] Documento liquidado ({draft.mode.value}): total={invoice.total_amount:.2f} "
        f"pagado={invoice.amount_paid:.2f} pendiente={invoice.amount_due:.2f}. "
        f"Cliente {settled_customer.rif}: deuda={settled_customer.outstanding_balance:.2f} "
        f"saldo a favor={settled_customer.credit_balance:.2f}"
    )
    return SettlementResult(invoice=invoice, customer=settled_customer, is_new_customer=is_new)


# ---------------------------------------------------------------------------
# Reverso
# ---------------------------------------------------------------------------

def ensure_cancellable(invoice: Invoice) -> None:
    if invoice.type == InvoiceType.RETURN:
        raise ValidationError(f"El documento {invoice.invoice_number} es una nota de crédito y no puede anularse.")
    if invoice.is_account_movement:
        raise ValidationError(f"El documento {invoice.invoice_number} es un abono o depósito a cuenta y no puede anularse.")
    if invoice.status == InvoiceStatus.CANCELLED:
        raise ConflictError(f"La factura {invoice.invoice_number} ya está anulada.")
    if invoice.status == InvoiceStatus.RETURN_PROCESSED:
        raise ConflictError(f"La factura {invoice.invoice_number} ya tiene una nota de crédito procesada.")


def require_reason(reason: Optional[str], message: str) -> str:
    reason = (reason or "").strip()
    if not reason:
        raise ValidationError(message, [FieldError(field="reasonForStatusChange", message="El motivo es obligatorio.")])
    return reason


def reverse_settlement(invoice: Invoice, customer: CustomerDetails) -> CustomerDetails:
    """
    Deshace sobre los saldos actuales del cliente el efecto que tuvo la
    liquidación de `invoice`.
    """
    ledger = CustomerLedger.of(customer)

    if invoice.is_account_movement:
        # Abono o depósito: lo aplicado a deuda vuelve a ser deuda y el resto
        # sale del saldo a favor.
        ledger.add_debt(invoice.applied_to_debt)
        ledger.use_credit(round_money(invoice.amount_paid - invoice.applied_to_debt))
        return ledger.apply_to(customer)

    if invoice.amount_due > 0:
        ledger.reduce_debt(invoice.amount_due)
    for payment in invoice.payment_methods:
        if payment.method in constants.CREDIT_METHODS:
            ledger.add_credit(payment.amount)
    if invoice.overpayment_amount and invoice.overpayment_handling == OverpaymentHandling.CREDITED_TO_ACCOUNT:
        ledger.use_credit(invoice.overpayment_amount)
    return ledger.apply_to(customer)


def cancel_invoice(
    invoice: Invoice,
    customer: CustomerDetails,
    reason: Optional[str],
    now: Optional[datetime] = None,
) -> ReversalResult:
    ensure_cancellable(invoice)
    reason = require_reason(reason, "Por favor, ingrese el motivo de la anulación.")

    updated_customer = reverse_settlement(invoice, customer)
    cancelled = invoice.model_copy(update={
        "status": InvoiceStatus.CANCELLED,
        "cancelled_at": now or datetime.now(),
        "reason_for_status_change": reason,
    })
    logger.info(
        f"[{invoice.invoice_number}] Factura anulada. Motivo: {reason}. "
        f"Cliente {updated_customer.rif}: deuda={updated_customer.outstanding_balance:.2f} "
        f"saldo a favor={updated_customer.credit_balance:.2f}"
    )
    return ReversalResult(invoice=cancelled, customer=updated_customer)
