# tests/conftest.py
from datetime import datetime

import pytest

from facturafacil.domain.models.customer import CompanyDetails, CustomerDetails
from facturafacil.domain.models.draft import InvoiceDraft
from facturafacil.domain.models.invoice import InvoiceItem, PaymentDetails
from facturafacil.infrastructure.persistence.memory_store import InMemoryInvoiceStore


# ===== FIXTURES =====

@pytest.fixture
def now():
    return datetime(2024, 5, 10, 12, 30, 0)


@pytest.fixture
def store():
    return InMemoryInvoiceStore()


@pytest.fixture
def company():
    return CompanyDetails(
        name="Inversiones El Sol C.A.",
        rif="J-40123456-7",
        address="Calle Bolívar, Valencia",
        fiscal_printer_enabled=True,
        fiscal_printer_api_url="http://localhost:3000/print",
    )


@pytest.fixture
def make_customer():
    """Cliente registrado con los saldos indicados."""
    def _make(outstanding=0.0, credit=0.0, customer_id="cli-1", rif="V-12345678"):
        return CustomerDetails(
            id=customer_id,
            name="María Pérez",
            rif=rif,
            address="Av. Principal, Caracas",
            outstanding_balance=outstanding,
            credit_balance=credit,
        )
    return _make


@pytest.fixture
def make_draft():
    """
    Borrador de venta. `prices` son precios unitarios (cantidad 1) y
    `payments` pares (método, monto).
    """
    def _make(customer=None, prices=(350.0,), payments=(("Efectivo", 406.0),), **overrides):
        data = dict(
            customer_details=customer or CustomerDetails(
                name="Cliente Nuevo", rif="V-87654321", address="Av. Libertador, Maracay"
            ),
            items=[
                InvoiceItem(id=f"item-{i}", description=f"Artículo {i}", quantity=1, unit_price=price)
                for i, price in enumerate(prices)
            ],
            payment_methods=[PaymentDetails(method=method, amount=amount) for method, amount in payments],
        )
        data.update(overrides)
        return InvoiceDraft(**data)
    return _make
