# facturafacil/application/use_cases/company_settings.py
import logging

from facturafacil.domain.errors import FieldError, ValidationError
from facturafacil.domain.models.customer import DEFAULT_COMPANY_ID, CompanyDetails
from facturafacil.domain.ports.invoice_store import InvoiceStore

logger = logging.getLogger(__name__)


class CompanySettingsUseCase:
    def __init__(self, store: InvoiceStore):
        self.store = store

    def get(self) -> CompanyDetails:
        # Sin configuración previa se devuelve una ficha vacía
        return self.store.get_company() or CompanyDetails()

    def update(self, company: CompanyDetails) -> CompanyDetails:
        errors = [
            FieldError(field=field, message="Campo requerido")
            for field in ("name", "rif", "address")
            if not getattr(company, field).strip()
        ]
        if company.fiscal_printer_enabled and not (company.fiscal_printer_api_url or "").strip():
            errors.append(FieldError(
                field="fiscalPrinterApiUrl",
                message="Indique la URL del puente de impresión fiscal.",
            ))
        if errors:
            raise ValidationError("Datos de la empresa inválidos.", errors)

        company = company.model_copy(update={"id": DEFAULT_COMPANY_ID})
        self.store.put_company(company)
        logger.info(f"[{company.rif}] Datos de la empresa actualizados.")
        return company
