# facturafacil/application/use_cases/invoice_queries.py
from typing import Iterable, List, Optional

from facturafacil.domain.errors import NotFoundError
from facturafacil.domain.models.invoice import Invoice
from facturafacil.domain.ports.invoice_store import InvoiceStore


def normalize_document_number(number: Optional[str]) -> str:
    return (number or "").strip().upper()


def newest_first(invoices: Iterable[Invoice]) -> List[Invoice]:
    return sorted(invoices, key=lambda i: i.date.timestamp(), reverse=True)


def find_invoice(invoices: Iterable[Invoice], invoice_id: str) -> Invoice:
    for invoice in invoices:
        if invoice.id == invoice_id:
            return invoice
    raise NotFoundError(f"Documento con ID {invoice_id} no encontrado.")


def replace_invoice(invoices: List[Invoice], updated: Invoice) -> List[Invoice]:
    return [updated if i.id == updated.id else i for i in invoices]


class ListInvoicesUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self) -> List[Invoice]:
        return newest_first(self.store.list_invoices())


class GetInvoiceUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, invoice_id: str) -> Invoice:
        return find_invoice(self.store.list_invoices(), invoice_id)
