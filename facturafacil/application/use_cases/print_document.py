# facturafacil/application/use_cases/print_document.py
import logging

from facturafacil.application.use_cases.invoice_queries import find_invoice
from facturafacil.domain.ports.document_printer import DocumentPrinter, PrintResult
from facturafacil.domain.ports.invoice_store import InvoiceStore


class PrintDocumentUseCase:
    """
    Envía un documento guardado a la impresora fiscal. El resultado de la
    impresión nunca altera la factura ni los saldos del cliente.
    """

    def __init__(self, store: InvoiceStore, printer: DocumentPrinter):
        self.store = store
        self.printer = printer

    def execute(self, invoice_id: str, simplified: bool = False) -> PrintResult:
        invoice = find_invoice(self.store.list_invoices(), invoice_id)

        company = self.store.get_company()
        if company is None or not company.fiscal_printer_enabled:
            logging.warning(f"[{invoice.invoice_number}] Impresora fiscal deshabilitada. No se envía el documento.")
            return PrintResult(success=False, message="La impresora fiscal no está habilitada en la configuración de la empresa.")

        result = self.printer.print_document(invoice, simplified=simplified)
        if result.success:
            logging.info(f"[{invoice.invoice_number}] Documento enviado a la impresora fiscal: {result.message}")
        else:
            logging.error(f"[{invoice.invoice_number}] Error de impresión fiscal: {result.message}")
        return result
