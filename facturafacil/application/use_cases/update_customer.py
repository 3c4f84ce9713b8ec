# facturafacil/application/use_cases/update_customer.py
import logging

from facturafacil.application.use_cases.customer_queries import normalize_rif
from facturafacil.application.use_cases.register_customer import validate_customer_identity
from facturafacil.domain.errors import ConflictError, NotFoundError
from facturafacil.domain.models.customer import CustomerDetails
from facturafacil.domain.ports.invoice_store import InvoiceStore

logger = logging.getLogger(__name__)


class UpdateCustomerUseCase:
    """
    Edición de los datos de identificación de un cliente. Los saldos solo
    cambian al liquidar o revertir documentos, nunca desde aquí.
    """

    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, customer_id: str, details: CustomerDetails) -> CustomerDetails:
        customers = self.store.list_customers()
        current = customers.get(customer_id)
        if current is None:
            raise NotFoundError(f"Cliente con ID {customer_id} no encontrado.")

        validate_customer_identity(details)
        wanted = normalize_rif(details.rif)
        for other in customers.values():
            if other.id != customer_id and normalize_rif(other.rif) == wanted:
                raise ConflictError(f"Ya existe un cliente con el RIF/Cédula {other.rif} ({other.name}).")

        updated = current.model_copy(update={
            "name": details.name.strip(),
            "rif": details.rif.strip(),
            "address": details.address.strip(),
            "phone": details.phone,
            "email": details.email,
        })
        customers[customer_id] = updated
        self.store.put_customers(customers)
        logger.info(f"[{updated.rif}] Datos del cliente actualizados: {updated.name}")
        return updated
