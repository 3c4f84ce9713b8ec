# facturafacil/infrastructure/api/routers/invoices_router.py
import logging
from typing import List

from fastapi import APIRouter, Depends

from facturafacil.application.use_cases.cancel_invoice import CancelInvoiceUseCase
from facturafacil.application.use_cases.finalize_invoice import FinalizeInvoiceUseCase
from facturafacil.application.use_cases.invoice_queries import GetInvoiceUseCase, ListInvoicesUseCase
from facturafacil.domain.models.draft import InvoiceDraft
from facturafacil.domain.models.invoice import Invoice
from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.domain.services.settlement import ReversalResult, SettlementResult
from facturafacil.infrastructure.api.dependencies import get_store
from facturafacil.infrastructure.api.schemas import CancelInvoiceRequest, PrintQueuedResponse
# Importamos la instancia de Celery, no la tarea específica
from facturafacil.infrastructure.celery.worker import celery_app

router = APIRouter(prefix="/api/v1/facturas", tags=["Facturas"])


@router.get("/", response_model=List[Invoice], summary="Historial de documentos")
def list_invoices(store: InvoiceStore = Depends(get_store)):
    return ListInvoicesUseCase(store).execute()


@router.post("/", status_code=201, response_model=SettlementResult, summary="Liquidar y guardar un documento")
def finalize_invoice(draft: InvoiceDraft, store: InvoiceStore = Depends(get_store)):
    """
    Recibe el borrador del editor (venta, abono a deuda o depósito a cuenta),
    lo liquida contra los saldos del cliente y guarda el resultado.
    """
    return FinalizeInvoiceUseCase(store).execute(draft)


@router.get("/{invoice_id}", response_model=Invoice, summary="Obtener un documento")
def get_invoice(invoice_id: str, store: InvoiceStore = Depends(get_store)):
    return GetInvoiceUseCase(store).execute(invoice_id)


@router.post("/{invoice_id}/anular", response_model=ReversalResult, summary="Anular una factura")
def cancel_invoice(invoice_id: str, request: CancelInvoiceRequest, store: InvoiceStore = Depends(get_store)):
    return CancelInvoiceUseCase(store).execute(invoice_id, request.reason_for_status_change)


@router.post("/{invoice_id}/imprimir", status_code=202, response_model=PrintQueuedResponse, summary="Enviar a la impresora fiscal")
def print_invoice(invoice_id: str, simplified: bool = False, store: InvoiceStore = Depends(get_store)):
    """
    Verifica que el documento exista y encola la impresión. El resultado
    queda en el log del worker.
    """
    GetInvoiceUseCase(store).execute(invoice_id)
    celery_app.send_task('tasks.print_document', args=[invoice_id, simplified])
    logging.info(f"[{invoice_id}] Impresión encolada (simplificado={simplified}).")
    return PrintQueuedResponse(status="print_queued", invoice_id=invoice_id)
