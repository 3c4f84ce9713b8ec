# facturafacil/application/use_cases/customer_summary.py
from typing import List

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from facturafacil.application.use_cases.customer_queries import GetCustomerUseCase
from facturafacil.application.use_cases.invoice_queries import newest_first
from facturafacil.domain.models.customer import CustomerDetails
from facturafacil.domain.models.invoice import Invoice, InvoiceStatus, InvoiceType
from facturafacil.domain.money import round_money
from facturafacil.domain.ports.invoice_store import InvoiceStore


def transaction_label(invoice: Invoice) -> str:
    if invoice.type == InvoiceType.RETURN:
        return "Nota de Crédito"
    if invoice.is_debt_payment:
        return "Abono Deuda"
    if invoice.is_credit_deposit:
        return "Depósito Cuenta"
    if invoice.status == InvoiceStatus.CANCELLED:
        return "Factura (Anulada)"
    if invoice.status == InvoiceStatus.RETURN_PROCESSED:
        return "Factura (NC Procesada)"
    return "Factura"


class CustomerTransaction(BaseModel):
    label: str
    invoice: Invoice

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomerSummary(BaseModel):
    customer: CustomerDetails
    transactions: List[CustomerTransaction]
    total_spent: float

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomerSummaryUseCase:
    """Estado de cuenta de un cliente: saldos, movimientos y total comprado."""

    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, customer_id: str) -> CustomerSummary:
        customer = GetCustomerUseCase(self.store).execute(customer_id)
        invoices = newest_first(
            i for i in self.store.list_invoices() if i.customer_details.id == customer.id
        )
        total_spent = round_money(sum(
            i.total_amount for i in invoices
            if i.is_ordinary_sale and i.status != InvoiceStatus.CANCELLED
        ))
        return CustomerSummary(
            customer=customer,
            transactions=[CustomerTransaction(label=transaction_label(i), invoice=i) for i in invoices],
            total_spent=total_spent,
        )
