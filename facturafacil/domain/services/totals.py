# facturafacil/domain/services/totals.py
"""
Cálculo de totales de un documento y resumen de pagos.

Funciones puras: no conocen clientes ni saldos. Los montos numéricos mal
formados deben convertirse a 0 antes de llegar aquí.
"""
from typing import TYPE_CHECKING, Iterable, NamedTuple, Optional

from facturafacil.domain.money import round_money

if TYPE_CHECKING:
    from facturafacil.domain.models.invoice import InvoiceItem, PaymentDetails


class Totals(NamedTuple):
    sub_total: float
    discount_amount: float
    tax_amount: float
    total_amount: float


class PaymentSummary(NamedTuple):
    amount_paid: float
    # Negativo cuando hay sobrepago; la liquidación decide qué hacer con él.
    amount_due: float


def compute_sub_total(items: Iterable["InvoiceItem"]) -> float:
    return round_money(sum(item.quantity * item.unit_price for item in items))


def compute_totals(items: Iterable["InvoiceItem"], tax_rate_percent: float, discount_value: float, apply_tax: bool) -> Totals:
    sub_total = compute_sub_total(items)
    discount_amount = round_money(discount_value or 0.0)
    taxable_amount = max(0.0, sub_total - discount_amount)
    # IVA y total se redondean a céntimos, como los imprime la factura fiscal
    tax_amount = round_money(taxable_amount * ((tax_rate_percent or 0.0) / 100)) if apply_tax else 0.0
    total_amount = round_money(taxable_amount + tax_amount)
    return Totals(sub_total, discount_amount, tax_amount, total_amount)


def compute_payment_summary(payments: Iterable["PaymentDetails"], total_amount: float) -> PaymentSummary:
    amount_paid = round_money(sum(p.amount for p in payments))
    return PaymentSummary(amount_paid, round_money(total_amount - amount_paid))


def discount_value_from_percentage(percentage: float, sub_total: float) -> float:
    return round_money((percentage or 0.0) / 100 * sub_total)


def discount_percentage_from_value(value: float, sub_total: float) -> float:
    if not sub_total or sub_total <= 0:
        return 0.0
    return round((value or 0.0) / sub_total * 100, 4)


def resolve_discount(sub_total: float, value: Optional[float] = None, percentage: Optional[float] = None) -> float:
    """
    Devuelve el descuento canónico (por valor). El porcentaje solo se usa si
    no llegó un valor explícito. Con subtotal cero no hay descuento posible.
    """
    if sub_total <= 0:
        return 0.0
    if value is not None:
        return round_money(value)
    if percentage is not None:
        return discount_value_from_percentage(percentage, sub_total)
    return 0.0
