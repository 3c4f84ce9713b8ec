# facturafacil/infrastructure/api/routers/customers_router.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from facturafacil.application.use_cases.customer_queries import (
    FindCustomerByRifUseCase,
    GetCustomerUseCase,
    ListCustomersUseCase,
)
from facturafacil.application.use_cases.customer_summary import CustomerSummary, CustomerSummaryUseCase
from facturafacil.application.use_cases.register_customer import RegisterCustomerUseCase
from facturafacil.application.use_cases.update_customer import UpdateCustomerUseCase
from facturafacil.domain.models.customer import CustomerDetails
from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.infrastructure.api.dependencies import get_store

router = APIRouter(prefix="/api/v1/clientes", tags=["Clientes"])


@router.get("/", response_model=List[CustomerDetails], summary="Listar clientes")
def list_customers(
    q: Optional[str] = Query(None, description="Filtra por nombre o RIF/Cédula."),
    store: InvoiceStore = Depends(get_store),
):
    return ListCustomersUseCase(store).execute(q)


@router.post("/", status_code=201, response_model=CustomerDetails, summary="Registrar un cliente")
def register_customer(details: CustomerDetails, store: InvoiceStore = Depends(get_store)):
    return RegisterCustomerUseCase(store).execute(details)


@router.get("/buscar", response_model=CustomerDetails, summary="Buscar un cliente por RIF/Cédula")
def find_customer_by_rif(rif: str = Query(..., description="RIF o Cédula del cliente."), store: InvoiceStore = Depends(get_store)):
    return FindCustomerByRifUseCase(store).execute(rif)


@router.get("/{customer_id}", response_model=CustomerDetails, summary="Obtener un cliente")
def get_customer(customer_id: str, store: InvoiceStore = Depends(get_store)):
    return GetCustomerUseCase(store).execute(customer_id)


@router.get("/{customer_id}/resumen", response_model=CustomerSummary, summary="Estado de cuenta del cliente")
def get_customer_summary(customer_id: str, store: InvoiceStore = Depends(get_store)):
    return CustomerSummaryUseCase(store).execute(customer_id)


@router.put("/{customer_id}", response_model=CustomerDetails, summary="Editar los datos de un cliente")
def update_customer(customer_id: str, details: CustomerDetails, store: InvoiceStore = Depends(get_store)):
    return UpdateCustomerUseCase(store).execute(customer_id, details)
