# facturafacil/domain/ports/invoice_store.py
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from facturafacil.domain.models.customer import CompanyDetails, CustomerDetails
from facturafacil.domain.models.invoice import Invoice


class InvoiceStore(ABC):
    """
    Contrato del almacén de documentos y clientes.
    Escrituras completas (la última gana) y lectura inmediata de lo escrito.
    """

    @abstractmethod
    def list_invoices(self) -> List[Invoice]:
        """Todas las facturas y notas de crédito, en orden de inserción."""
        pass

    @abstractmethod
    def list_customers(self) -> Dict[str, CustomerDetails]:
        """Clientes indexados por su id."""
        pass

    @abstractmethod
    def put_invoices(self, invoices: List[Invoice]) -> None:
        """Reemplaza la colección completa de documentos."""
        pass

    @abstractmethod
    def put_customers(self, customers: Dict[str, CustomerDetails]) -> None:
        """Reemplaza la colección completa de clientes."""
        pass

    @abstractmethod
    def get_company(self) -> Optional[CompanyDetails]:
        pass

    @abstractmethod
    def put_company(self, company: CompanyDetails) -> None:
        pass
