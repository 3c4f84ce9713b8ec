# facturafacil/application/use_cases/customer_queries.py
from typing import Dict, List, Optional

from facturafacil.domain.errors import NotFoundError, ValidationError
from facturafacil.domain.models.customer import CustomerDetails
from facturafacil.domain.ports.invoice_store import InvoiceStore


def normalize_rif(rif: Optional[str]) -> str:
    return (rif or "").strip().upper()


def find_customer_by_rif(customers: Dict[str, CustomerDetails], rif: Optional[str]) -> Optional[CustomerDetails]:
    wanted = normalize_rif(rif)
    if not wanted:
        return None
    for customer in customers.values():
        if normalize_rif(customer.rif) == wanted:
            return customer
    return None


class ListCustomersUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, query: Optional[str] = None) -> List[CustomerDetails]:
        customers = self.store.list_customers().values()
        term = (query or "").strip().lower()
        if term:
            # Coincidencia parcial por nombre o RIF/Cédula
            customers = [c for c in customers if term in c.name.lower() or term in c.rif.lower()]
        return sorted(customers, key=lambda c: c.name.lower())



class GetCustomerUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, customer_id: str) -> CustomerDetails:
        customer = self.store.list_customers().get(customer_id)
        if customer is None:
            raise NotFoundError(f"Cliente con ID {customer_id} no encontrado.")
        return customer


class FindCustomerByRifUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, rif: str) -> CustomerDetails:
        if not normalize_rif(rif):
            raise ValidationError("Ingrese un RIF/Cédula para buscar.")
        customer = find_customer_by_rif(self.store.list_customers(), rif)
        if customer is None:
            raise NotFoundError(f"No existe un cliente con RIF/Cédula {rif}.")
        return customer
