# facturafacil/infrastructure/api/schemas.py
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CancelInvoiceRequest(ApiModel):
    reason_for_status_change: str = ""


class CreditNoteRequest(ApiModel):
    # Número de factura (ej. FACT-123456) o su ID
    invoice_identifier: str
    refund_method: str = ""
    refund_reference: Optional[str] = None
    reason: str = ""
    cashier_number: Optional[str] = None
    salesperson: Optional[str] = None


class WithdrawalPreviewRequest(ApiModel):
    customer_id: str
    amount: float


class WithdrawalRequest(WithdrawalPreviewRequest):
    refund_method: str = ""
    refund_reference: Optional[str] = None
    reason: str = ""
    cashier_number: Optional[str] = None
    salesperson: Optional[str] = None


class PrintQueuedResponse(ApiModel):
    status: str
    invoice_id: str
