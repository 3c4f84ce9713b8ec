# facturafacil/infrastructure/api/print_bridge.py
"""
Puente local de impresión fiscal. Corre en la máquina conectada a la
impresora y recibe los documentos que envía `FiscalPrinterAdapter`.

    uvicorn facturafacil.infrastructure.api.print_bridge:bridge_app --port 3000
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')

bridge_app = FastAPI(
    title="Puente de Impresión Fiscal FacturaFácil",
    description="Recibe documentos y los envía a la impresora fiscal local.",
    version="1.0.0"
)

bridge_app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def document_type_label(document: Dict[str, Any]) -> str:
    if document.get("type") == "return":
        return "Nota de Crédito"
    if document.get("isDebtPayment"):
        return "Abono a Deuda"
    if document.get("isCreditDeposit"):
        return "Depósito a Cuenta"
    return "Factura"


def _amount(value: Any) -> str:
    return f"{float(value or 0):.2f}"


def _log_document(document: Dict[str, Any]) -> None:
    lines = ["*** INICIO DEL DOCUMENTO ***", "SENIAT"]

    company = document.get("companyDetails") or {}
    if company:
        lines += ["--- Detalles del Negocio ---", f"Nombre: {company.get('name')}",
                  f"RIF: {company.get('rif')}", f"Dirección: {company.get('address')}"]

    lines += ["--- Información del Documento ---",
              f"Tipo: {document_type_label(document)} NRO: {document.get('invoiceNumber')}",
              f"Fecha: {document.get('date')}"]

    customer = document.get("customerDetails") or {}
    lines += ["--- Cliente ---", f"Nombre: {customer.get('name')}",
              f"RIF/CI: {customer.get('rif')}", f"Dirección: {customer.get('address')}"]

    lines.append("--- Artículos ---")
    for item in document.get("items") or []:
        quantity = float(item.get("quantity") or 0)
        unit_price = float(item.get("unitPrice") or 0)
        lines.append(f"- {item.get('description')} (Cant: {quantity:g}, P.Unit: {unit_price:.2f}, Total: {quantity * unit_price:.2f})")

    # El formato simplificado no trae totales: la impresora los calcula
    if "totalAmount" in document:
        lines += ["--- Totales ---", f"Subtotal: {_amount(document.get('subTotal'))}"]
        if float(document.get("discountValue") or 0) > 0:
            lines.append(f"Descuento: -{_amount(document.get('discountValue'))}")
        lines += [f"IVA: {_amount(document.get('taxAmount'))}", f"TOTAL: {_amount(document.get('totalAmount'))}"]

    lines.append("--- Pagos ---")
    for payment in document.get("paymentMethods") or []:
        reference = f" (Ref: {payment['reference']})" if payment.get("reference") else ""
        lines.append(f"- {payment.get('method')}: {_amount(payment.get('amount'))}{reference}")

    if document.get("warrantyText"):
        lines += ["--- Nota de Garantía ---", document["warrantyText"]]

    logging.info("\n  ".join([""] + lines))


@bridge_app.get("/status", tags=["Health Check"])
def status():
    return {"status": "ok", "message": "Servicio de impresión fiscal activo."}


@bridge_app.post("/print")
def print_document(document: Optional[Dict[str, Any]] = Body(None)):
    logging.info(f"--- Solicitud de Impresión Recibida [{datetime.now():%d/%m/%Y %H:%M:%S}] ---")
    if not document or not document.get("invoiceNumber"):
        logging.error("Error: Datos de factura inválidos.")
        return JSONResponse(status_code=400, content={"success": False, "message": "Datos de factura inválidos."})

    _log_document(document)
    # TODO: enviar los comandos a la impresora por puerto serie cuando se defina el modelo de impresora.
    logging.info("--- Impresión Simulada con Éxito ---")
    return {"success": True, "message": "Documento recibido por el servicio de impresión."}
