# facturafacil/application/use_cases/withdraw_credit.py
from datetime import datetime
from typing import Optional

from facturafacil.application.use_cases.customer_queries import GetCustomerUseCase
from facturafacil.domain.models.invoice import Invoice
from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.domain.services.credit_notes import (
    CreditNoteResult,
    confirm_credit_withdrawal,
    prepare_credit_withdrawal,
)


class WithdrawCreditUseCase:
    """
    Retiro de saldo a favor en dos pasos: `prepare` genera la vista previa
    (no persiste nada) y `confirm` registra la nota de crédito de retiro.
    """

    def __init__(self, store: InvoiceStore):
        self.store = store

    def prepare(self, customer_id: str, amount: float, now: Optional[datetime] = None) -> Invoice:
        customer = GetCustomerUseCase(self.store).execute(customer_id)
        return prepare_credit_withdrawal(customer, amount, company=self.store.get_company(), now=now)

    def confirm(
        self,
        customer_id: str,
        amount: float,
        refund_method: str,
        reason: str,
        refund_reference: Optional[str] = None,
        cashier_number: Optional[str] = None,
        salesperson: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> CreditNoteResult:
        customers = self.store.list_customers()
        customer = GetCustomerUseCase(self.store).execute(customer_id)

        result = confirm_credit_withdrawal(
            customer,
            amount,
            refund_method=refund_method,
            reason=reason,
            refund_reference=refund_reference,
            company=self.store.get_company(),
            cashier_number=cashier_number,
            salesperson=salesperson,
            now=now,
        )

        invoices = self.store.list_invoices()
        invoices.append(result.credit_note)
        customers[result.customer.id] = result.customer
        self.store.put_customers(customers)
        self.store.put_invoices(invoices)
        return result
