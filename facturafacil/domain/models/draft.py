# facturafacil/domain/models/draft.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from facturafacil.domain.constants import DEFAULT_TAX_RATE, NO_WARRANTY
from facturafacil.domain.models.customer import CustomerDetails
from facturafacil.domain.models.invoice import InvoiceItem, PaymentDetails


class InvoiceMode(str, Enum):
    NORMAL = "normal"                # Venta ordinaria
    DEBT_PAYMENT = "debtPayment"     # Abono a deuda pendiente
    CREDIT_DEPOSIT = "creditDeposit" # Depósito a saldo a favor


class OverpaymentChoice(str, Enum):
    CREDIT_TO_ACCOUNT = "creditToAccount"
    REFUND_NOW = "refundNow"


class InvoiceDraft(BaseModel):
    """
    Borrador capturado por el editor, antes de liquidar.

    `customer_details` puede venir sin `id`: en ese caso se busca por RIF o se
    registra un cliente nuevo con los datos suministrados. El descuento se
    expresa por valor; si solo llega el porcentaje se deriva el valor a partir
    del subtotal.
    """
    invoice_number: Optional[str] = None
    date: Optional[datetime] = None
    mode: InvoiceMode = InvoiceMode.NORMAL
    customer_details: CustomerDetails

    items: List[InvoiceItem] = Field(default_factory=list)
    payment_methods: List[PaymentDetails] = Field(default_factory=list)

    apply_tax: bool = True
    tax_rate: float = DEFAULT_TAX_RATE
    apply_discount: bool = False
    discount_value: Optional[float] = None
    discount_percentage: Optional[float] = None

    overpayment_handling_choice: OverpaymentChoice = OverpaymentChoice.CREDIT_TO_ACCOUNT
    change_refund_payment_methods: List[PaymentDetails] = Field(default_factory=list)

    cashier_number: Optional[str] = None
    salesperson: Optional[str] = None
    notes: Optional[str] = None
    thank_you_message: Optional[str] = None

    apply_warranty: bool = False
    warranty_duration: str = NO_WARRANTY
    warranty_text: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
