# facturafacil/infrastructure/persistence/invoice_store_adapter.py
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from facturafacil.domain.models.customer import CompanyDetails, CustomerDetails
from facturafacil.domain.models.invoice import Invoice
from facturafacil.domain.ports.invoice_store import InvoiceStore
from .models import Cliente, Empresa, Factura


class SQLAlchemyInvoiceStore(InvoiceStore):
    """
    Guarda cada documento y cliente como JSON (claves camelCase). El commit o
    rollback queda a cargo de quien abrió la sesión.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_invoices(self) -> List[Invoice]:
        rows = self.db.query(Factura).order_by(Factura.posicion).all()
        return [Invoice.model_validate(row.datos) for row in rows]

    def list_customers(self) -> Dict[str, CustomerDetails]:
        rows = self.db.query(Cliente).all()
        return {row.id: CustomerDetails.model_validate(row.datos) for row in rows}

    def put_invoices(self, invoices: List[Invoice]) -> None:
        self.db.query(Factura).delete()
        self.db.add_all([
            Factura(
                id=invoice.id,
                posicion=position,
                numero=invoice.invoice_number,
                cliente_id=invoice.customer_details.id,
                datos=invoice.model_dump(mode="json", by_alias=True),
            )
            for position, invoice in enumerate(invoices)
        ])
        self.db.flush()

    def put_customers(self, customers: Dict[str, CustomerDetails]) -> None:
        self.db.query(Cliente).delete()
        self.db.add_all([
            Cliente(id=customer_id, rif=customer.rif, datos=customer.model_dump(mode="json", by_alias=True))
            for customer_id, customer in customers.items()
        ])
        self.db.flush()

    def get_company(self) -> Optional[CompanyDetails]:
        row = self.db.query(Empresa).first()
        return CompanyDetails.model_validate(row.datos) if row else None

    def put_company(self, company: CompanyDetails) -> None:
        self.db.query(Empresa).delete()
        self.db.add(Empresa(id=company.id, datos=company.model_dump(mode="json", by_alias=True)))
        self.db.flush()
