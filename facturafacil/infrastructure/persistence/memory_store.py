# facturafacil/infrastructure/persistence/memory_store.py
from typing import Dict, List, Optional

from facturafacil.domain.models.customer import CompanyDetails, CustomerDetails
from facturafacil.domain.models.invoice import Invoice
from facturafacil.domain.ports.invoice_store import InvoiceStore


class InMemoryInvoiceStore(InvoiceStore):
    """Almacén en memoria. Entrega y guarda copias para que nadie comparta estado."""

    def __init__(self):
        self._invoices: List[Invoice] = []
        self._customers: Dict[str, CustomerDetails] = {}
        self._company: Optional[CompanyDetails] = None

    def list_invoices(self) -> List[Invoice]:
        return [i.model_copy(deep=True) for i in self._invoices]

    def list_customers(self) -> Dict[str, CustomerDetails]:
        return {k: c.model_copy(deep=True) for k, c in self._customers.items()}

    def put_invoices(self, invoices: List[Invoice]) -> None:
        self._invoices = [i.model_copy(deep=True) for i in invoices]

    def put_customers(self, customers: Dict[str, CustomerDetails]) -> None:
        self._customers = {k: c.model_copy(deep=True) for k, c in customers.items()}

    def get_company(self) -> Optional[CompanyDetails]:
        return self._company.model_copy(deep=True) if self._company else None

    def put_company(self, company: CompanyDetails) -> None:
        self._company = company.model_copy(deep=True)
