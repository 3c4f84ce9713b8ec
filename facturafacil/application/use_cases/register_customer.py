# facturafacil/application/use_cases/register_customer.py
import logging
import uuid

from facturafacil.application.use_cases.customer_queries import find_customer_by_rif
from facturafacil.domain.errors import ConflictError, FieldError, ValidationError
from facturafacil.domain.models.customer import CustomerDetails
from facturafacil.domain.ports.invoice_store import InvoiceStore

logger = logging.getLogger(__name__)


def validate_customer_identity(details: CustomerDetails) -> None:
    """
    Reglas del formulario de clientes. El formato del correo ya lo garantiza
    el modelo (`EmailStr`).
    """
    errors = []
    if len(details.name.strip()) < 2:
        errors.append(FieldError(field="name", message="El nombre debe tener al menos 2 caracteres."))
    if len(details.rif.strip()) < 5:
        errors.append(FieldError(field="rif", message="El RIF/Cédula debe tener al menos 5 caracteres."))
    if len(details.address.strip()) < 5:
        errors.append(FieldError(field="address", message="La dirección debe tener al menos 5 caracteres."))
    if errors:
        raise ValidationError("Datos del cliente inválidos.", errors)


class RegisterCustomerUseCase:
    """
    Alta de clientes desde el formulario de clientes. Un cliente nuevo
    siempre arranca sin deuda ni saldo a favor.
    """

    def __init__(self, store: InvoiceStore):
        self.store = store

    def execute(self, details: CustomerDetails) -> CustomerDetails:
        validate_customer_identity(details)
        customers = self.store.list_customers()

        existing = find_customer_by_rif(customers, details.rif)
        if existing is not None:
            raise ConflictError(f"Ya existe un cliente con el RIF/Cédula {existing.rif} ({existing.name}).")

        customer = details.model_copy(update={
            "id": str(uuid.uuid4()),
            "name": details.name.strip(),
            "rif": details.rif.strip(),
            "address": details.address.strip(),
            "outstanding_balance": 0.0,
            "credit_balance": 0.0,
        })
        customers[customer.id] = customer
        self.store.put_customers(customers)
        logger.info(f"[{customer.rif}] Cliente registrado: {customer.name}")
        return customer
