# facturafacil/application/use_cases/issue_credit_note.py
from datetime import datetime
from typing import List, Optional

from facturafacil.application.use_cases.invoice_queries import (
    find_invoice,
    normalize_document_number,
    replace_invoice,
)
from facturafacil.domain.errors import ValidationError
from facturafacil.domain.models.invoice import Invoice, InvoiceType
from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.domain.services.credit_notes import CreditNoteResult, issue_credit_note


def locate_original(invoices: List[Invoice], identifier: str) -> Invoice:
    """
    Busca la factura a devolver por número (sin distinguir mayúsculas, solo
    facturas de venta) y, si no aparece, por id.
    """
    wanted = normalize_document_number(identifier)
    if not wanted:
        raise ValidationError("Ingrese el número o ID de la factura a devolver.")
    for invoice in invoices:
        if invoice.type == InvoiceType.SALE and normalize_document_number(invoice.invoice_number) == wanted:
            return invoice
    return find_invoice(invoices, identifier.strip())


class IssueCreditNoteUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(
        self,
        identifier: str,
        refund_method: str,
        reason: str,
        refund_reference: Optional[str] = None,
        cashier_number: Optional[str] = None,
        salesperson: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CreditNoteResult:
        invoices = self.store.list_invoices()
        original = locate_original(invoices, identifier)

        customers = self.store.list_customers()
        customer = customers.get(original.customer_details.id)

        result = issue_credit_note(
            original,
            invoices,
            customer,
            refund_method=refund_method,
            reason=reason,
            refund_reference=refund_reference,
            cashier_number=cashier_number,
            salesperson=salesperson,
            now=now,
        )

        invoices = replace_invoice(invoices, result.original)
        invoices.append(result.credit_note)
        if result.customer is not None:
            customers[result.customer.id] = result.customer
            self.store.put_customers(customers)
        self.store.put_invoices(invoices)
        return result
