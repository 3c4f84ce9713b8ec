# facturafacil/infrastructure/external/fiscal_printer_adapter.py
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

import requests

import config
from facturafacil.domain.models.invoice import Invoice
from facturafacil.domain.ports.document_printer import DocumentPrinter, PrintResult

CONNECTION_ERROR_MESSAGE = "No se pudo conectar con el servicio local de la impresora fiscal. ¿Está en ejecución?"
STATUS_TIMEOUT = 2


def build_print_payload(invoice: Invoice, simplified: bool = False) -> Dict[str, Any]:
    """
    Cuerpo JSON enviado al puente. La versión simplificada omite totales y
    datos de la empresa: la impresora fiscal recalcula los montos.
    """
    if not simplified:
        return invoice.model_dump(mode="json", by_alias=True)

    customer = invoice.customer_details
    payload = {
        "type": invoice.type.value,
        "isDebtPayment": invoice.is_debt_payment,
        "isCreditDeposit": invoice.is_credit_deposit,
        "status": invoice.status.value,
        "originalInvoiceId": invoice.original_invoice_id,
        "invoiceNumber": invoice.invoice_number,
        "date": invoice.date.isoformat(),
        "customerDetails": {
            "name": customer.name,
            "rif": customer.rif,
            "address": customer.address,
        },
        "items": [
            {"description": item.description, "quantity": item.quantity, "unitPrice": item.unit_price}
            for item in invoice.items
        ],
        "discountValue": invoice.discount_value,
        "discountPercentage": invoice.discount_percentage,
        "paymentMethods": [p.model_dump(mode="json", by_alias=True) for p in invoice.payment_methods],
        "notes": invoice.notes,
        "warrantyText": invoice.warranty_text,
        "thankYouMessage": invoice.thank_you_message,
        "overpaymentAmount": invoice.overpayment_amount,
        "overpaymentHandling": invoice.overpayment_handling.value if invoice.overpayment_handling else None,
        "changeRefundPaymentMethods": [
            p.model_dump(mode="json", by_alias=True) for p in invoice.change_refund_payment_methods or []
        ],
    }
    return payload


def status_url_for(print_url: str) -> str:
    """El estado se consulta en `/status` del mismo origen que la URL de impresión."""
    parts = urlsplit(print_url)
    return urlunsplit((parts.scheme, parts.netloc, "/status", "", ""))


class FiscalPrinterAdapter(DocumentPrinter):
    def __init__(self, api_url: Optional[str] = None, timeout: Optional[float] = None):
        self.api_url = api_url or config.FISCAL_PRINTER_API_URL
        self.timeout = timeout or config.FISCAL_PRINTER_TIMEOUT

    def _error_message(self, response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            text = response.text.strip()
            return f"Error del servicio fiscal: {text}" if text else f"Error del servicio fiscal con código: {response.status_code}"
        message = body.get("message") if isinstance(body, dict) else None
        return f"Error: {message or response.text}"

    def print_document(self, invoice: Invoice, simplified: bool = False) -> PrintResult:
        payload = build_print_payload(invoice, simplified)
        logging.info(f"[{invoice.invoice_number}] Enviando documento a {self.api_url} (simplificado={simplified})...")
        try:
            response = requests.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logging.error(f"[{invoice.invoice_number}] Error de conexión con la impresora fiscal: {e}")
            return PrintResult(success=False, message=CONNECTION_ERROR_MESSAGE)

        if not response.ok:
            message = self._error_message(response)
            logging.error(f"[{invoice.invoice_number}] El puente respondió {response.status_code}: {message}")
            return PrintResult(success=False, message=message)

        return PrintResult(success=True, message="Documento enviado a la impresora fiscal.")

    def check_status(self) -> PrintResult:
        url = status_url_for(self.api_url)
        try:
            response = requests.get(url, timeout=STATUS_TIMEOUT)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            logging.warning(f"Puente de impresión no disponible en {url}: {e}")
            return PrintResult(success=False, message=CONNECTION_ERROR_MESSAGE)

        try:
            body = response.json()
        except ValueError:
            body = {}
        message = body.get("message", "") if isinstance(body, dict) else ""
        return PrintResult(success=True, message=message or "Servicio de impresión fiscal activo.")
