# facturafacil/domain/ports/document_printer.py
from abc import ABC, abstractmethod

from pydantic import BaseModel

from facturafacil.domain.models.invoice import Invoice


class PrintResult(BaseModel):
    success: bool
    message: str = ""


class DocumentPrinter(ABC):
    """Puerto para el envío de documentos a la impresora fiscal (puente local)."""

    @abstractmethod
    def print_document(self, invoice: Invoice, simplified: bool = False) -> PrintResult:
        """
        Envía el documento al puente. Los fallos de red o HTTP no se propagan:
        se devuelven como `PrintResult(success=False)`.
        """
        pass

    @abstractmethod
    def check_status(self) -> PrintResult:
        """Consulta si el puente de impresión está disponible."""
        pass
