# facturafacil/infrastructure/api/dependencies.py
import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.infrastructure.persistence.database import SessionLocal
from facturafacil.infrastructure.persistence.invoice_store_adapter import SQLAlchemyInvoiceStore


def get_db():
    """Genera una sesión de base de datos por petición."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> InvoiceStore:
    """
    Almacén ligado a la sesión de la petición. Confirma al terminar el
    endpoint y revierte si este lanzó cualquier error, incluidos los de negocio.
    """
    store = SQLAlchemyInvoiceStore(db)
    try:
        yield store
        db.commit()
    except Exception:
        logging.warning("Error durante la petición. Iniciando rollback.")
        db.rollback()
        raise
