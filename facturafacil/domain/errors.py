# facturafacil/domain/errors.py
from typing import List, Optional

from pydantic import BaseModel


class FieldError(BaseModel):
    """Error asociado a un campo concreto del documento (ej. `paymentMethods.1.amount`)."""
    field: str
    message: str


class DomainError(Exception):
    """Base de los errores de negocio. Ninguno deja el estado persistido a medias."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    """Datos de entrada inválidos o documento no elegible para la operación."""

    def __init__(self, message: str, errors: Optional[List[FieldError]] = None):
        super().__init__(message)
        self.errors = errors or []


class NotFoundError(DomainError):
    pass


class ConflictError(DomainError):
    """La operación choca con el estado actual (ej. nota de crédito ya emitida)."""
    pass
