# facturafacil/application/use_cases/cancel_invoice.py
from datetime import datetime
from typing import Optional

from facturafacil.application.use_cases.invoice_queries import find_invoice, replace_invoice
from facturafacil.domain.errors import NotFoundError
from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.domain.services.settlement import ReversalResult, cancel_invoice, ensure_cancellable


class CancelInvoiceUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, invoice_id: str, reason: Optional[str], now: Optional[datetime] = None) -> ReversalResult:
        invoices = self.store.list_invoices()
        invoice = find_invoice(invoices, invoice_id)
        ensure_cancellable(invoice)

        customers = self.store.list_customers()
        customer = customers.get(invoice.customer_details.id)
        if customer is None:
            raise NotFoundError(
                f"No se encontró el cliente de la factura {invoice.invoice_number}; no es posible revertir sus saldos."
            )

        result = cancel_invoice(invoice, customer, reason, now=now)

        customers[result.customer.id] = result.customer
        self.store.put_customers(customers)
        self.store.put_invoices(replace_invoice(invoices, result.invoice))
        return result
