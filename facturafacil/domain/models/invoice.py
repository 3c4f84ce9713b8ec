# facturafacil/domain/models/invoice.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from facturafacil.domain.models.customer import CompanyDetails, CustomerDetails
from facturafacil.domain.money import round_money
from facturafacil.domain.services.totals import discount_percentage_from_value


class InvoiceType(str, Enum):
    SALE = "sale"      # Factura de venta, abono o depósito
    RETURN = "return"  # Nota de crédito


class InvoiceStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"                # Anulada
    RETURN_PROCESSED = "return_processed"  # Tiene una nota de crédito asociada


class OverpaymentHandling(str, Enum):
    CREDITED_TO_ACCOUNT = "creditedToAccount"
    REFUNDED = "refunded"


class InvoiceItem(BaseModel):
    id: str
    description: str = ""
    quantity: float = 1.0
    unit_price: float = 0.0

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @computed_field(alias="totalPrice")
    @property
    def total_price(self) -> float:
        # Siempre derivado; el valor recibido en la entrada se ignora.
        return round_money(self.quantity * self.unit_price)


class PaymentDetails(BaseModel):
    method: str
    amount: float = 0.0
    reference: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Invoice(BaseModel):
    """
    Documento fiscal ya liquidado: factura de venta, abono a deuda, depósito
    a cuenta o nota de crédito.

    Los campos financieros quedan fijos al crearse. Después solo cambian
    `status`, `cancelled_at` y `reason_for_status_change`.
    """
    id: str
    invoice_number: str
    date: datetime
    type: InvoiceType = InvoiceType.SALE
    original_invoice_id: Optional[str] = None
    is_debt_payment: bool = False
    is_credit_deposit: bool = False
    status: InvoiceStatus = InvoiceStatus.ACTIVE

    company_details: Optional[CompanyDetails] = None
    customer_details: CustomerDetails

    items: List[InvoiceItem] = Field(default_factory=list)
    payment_methods: List[PaymentDetails] = Field(default_factory=list)

    # --- Totales ---
    sub_total: float = 0.0
    discount_value: float = 0.0
    tax_rate: float = 0.0
    tax_amount: float = 0.0
    total_amount: float = 0.0
    amount_paid: float = 0.0
    amount_due: float = 0.0
    # Parte de un abono o depósito que redujo la deuda del cliente
    applied_to_debt: float = 0.0

    # --- Textos del documento ---
    cashier_number: Optional[str] = None
    salesperson: Optional[str] = None
    notes: Optional[str] = None
    thank_you_message: str = ""
    warranty_text: Optional[str] = None

    # --- Sobrepago ---
    overpayment_amount: Optional[float] = None
    overpayment_handling: Optional[OverpaymentHandling] = None
    change_refund_payment_methods: Optional[List[PaymentDetails]] = None

    # --- Auditoría ---
    cancelled_at: Optional[datetime] = None
    reason_for_status_change: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @computed_field(alias="discountPercentage")
    @property
    def discount_percentage(self) -> float:
        return discount_percentage_from_value(self.discount_value, self.sub_total)

    @property
    def is_account_movement(self) -> bool:
        """Abonos a deuda y depósitos a cuenta: no hay mercancía involucrada."""
        return self.is_debt_payment or self.is_credit_deposit

    @property
    def is_ordinary_sale(self) -> bool:
        return self.type == InvoiceType.SALE and not self.is_account_movement
