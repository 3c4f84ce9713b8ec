# facturafacil/application/use_cases/finalize_invoice.py
import logging
from datetime import datetime
from typing import Optional

from facturafacil.application.use_cases.customer_queries import find_customer_by_rif
from facturafacil.application.use_cases.invoice_queries import normalize_document_number
from facturafacil.domain.errors import ConflictError
from facturafacil.domain.models.draft import InvoiceDraft
from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.domain.services.settlement import SettlementResult, finalize_invoice

logger = logging.getLogger(__name__)


class FinalizeInvoiceUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, draft: InvoiceDraft, now: Optional[datetime] = None) -> SettlementResult:
        """
        Liquida el borrador y persiste la factura junto con el cliente
        actualizado. El cliente se busca por id y, si no aparece, por RIF.
        """
        customers = self.store.list_customers()
        invoices = self.store.list_invoices()

        requested_number = normalize_document_number(draft.invoice_number)
        if requested_number and any(normalize_document_number(i.invoice_number) == requested_number for i in invoices):
            raise ConflictError(f"Ya existe un documento con el número {draft.invoice_number}.")

        details = draft.customer_details
        stored = customers.get(details.id) if details.id else None
        if stored is None:
            stored = find_customer_by_rif(customers, details.rif)

        result = finalize_invoice(draft, stored, company=self.store.get_company(), now=now)

        invoices.append(result.invoice)
        customers[result.customer.id] = result.customer
        self.store.put_customers(customers)
        self.store.put_invoices(invoices)

        logger.info(f"[{result.invoice.invoice_number}] Documento guardado (cliente nuevo: {result.is_new_customer}).")
        return result
