# facturafacil/infrastructure/celery/worker.py
import logging

from celery import Celery

import config

celery_app = Celery(
    'tasks',
    broker=config.CELERY_BROKER_URL,
    backend=None  # El resultado de la impresión queda en el log, no se consulta.
)

celery_app.conf.update(
    task_ignore_result=True,
)

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')

from facturafacil.application.use_cases.print_document import PrintDocumentUseCase
from facturafacil.infrastructure.external.fiscal_printer_adapter import FiscalPrinterAdapter
from facturafacil.infrastructure.persistence.database import SessionLocal
from facturafacil.infrastructure.persistence.invoice_store_adapter import SQLAlchemyInvoiceStore


@celery_app.task(name="tasks.print_document")
def print_document(invoice_id: str, simplified: bool = False) -> dict:
    logging.info(f"[{invoice_id}] >>> INICIO DE LA IMPRESIÓN.")
    db_session = SessionLocal()
    try:
        store = SQLAlchemyInvoiceStore(db_session)
        company = store.get_company()
        printer = FiscalPrinterAdapter(api_url=company.fiscal_printer_api_url if company else None)

        result = PrintDocumentUseCase(store=store, printer=printer).execute(invoice_id, simplified=simplified)
        logging.info(f"[{invoice_id}] Resultado de la impresión: success={result.success} - {result.message}")
        return result.model_dump()
    except Exception:
        logging.error(f"[{invoice_id}] ¡ERROR! No se pudo procesar la impresión.", exc_info=True)
        db_session.rollback()
        raise
    finally:
        logging.info(f"[{invoice_id}] Cerrando sesión de base de datos.")
        db_session.close()
