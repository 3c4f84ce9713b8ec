# facturafacil/infrastructure/api/routers/company_router.py
from fastapi import APIRouter, Depends

from facturafacil.application.use_cases.company_settings import CompanySettingsUseCase
from facturafacil.domain.models.customer import CompanyDetails
from facturafacil.domain.ports.document_printer import PrintResult
from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.infrastructure.api.dependencies import get_store
from facturafacil.infrastructure.external.fiscal_printer_adapter import FiscalPrinterAdapter

router = APIRouter(prefix="/api/v1/empresa", tags=["Empresa"])


@router.get("/", response_model=CompanyDetails, summary="Datos de la empresa emisora")
def get_company(store: InvoiceStore = Depends(get_store)):
    return CompanySettingsUseCase(store).get()


@router.put("/", response_model=CompanyDetails, summary="Actualizar los datos de la empresa")
def update_company(company: CompanyDetails, store: InvoiceStore = Depends(get_store)):
    return CompanySettingsUseCase(store).update(company)


@router.get("/impresora/estado", response_model=PrintResult, summary="Estado del puente de impresión fiscal")
def get_printer_status(store: InvoiceStore = Depends(get_store)):
    company = CompanySettingsUseCase(store).get()
    if not company.fiscal_printer_enabled:
        return PrintResult(success=False, message="La impresora fiscal no está habilitada.")
    return FiscalPrinterAdapter(api_url=company.fiscal_printer_api_url).check_status()
