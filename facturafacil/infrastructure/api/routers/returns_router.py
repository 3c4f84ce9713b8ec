# facturafacil/infrastructure/api/routers/returns_router.py
from fastapi import APIRouter, Depends

from facturafacil.application.use_cases.issue_credit_note import IssueCreditNoteUseCase
from facturafacil.application.use_cases.withdraw_credit import WithdrawCreditUseCase
from facturafacil.domain.models.invoice import Invoice
from facturafacil.domain.ports.invoice_store import InvoiceStore
from facturafacil.domain.services.credit_notes import CreditNoteResult
from facturafacil.infrastructure.api.dependencies import get_store
from facturafacil.infrastructure.api.schemas import CreditNoteRequest, WithdrawalPreviewRequest, WithdrawalRequest

router = APIRouter(prefix="/api/v1/devoluciones", tags=["Devoluciones"])


@router.post("/", status_code=201, response_model=CreditNoteResult, summary="Emitir una nota de crédito")
def issue_credit_note(request: CreditNoteRequest, store: InvoiceStore = Depends(get_store)):
    return IssueCreditNoteUseCase(store).execute(
        request.invoice_identifier,
        refund_method=request.refund_method,
        reason=request.reason,
        refund_reference=request.refund_reference,
        cashier_number=request.cashier_number,
        salesperson=request.salesperson,
    )


@router.post("/retiros/preparar", response_model=Invoice, summary="Vista previa de un retiro de saldo a favor")
def prepare_withdrawal(request: WithdrawalPreviewRequest, store: InvoiceStore = Depends(get_store)):
    return WithdrawCreditUseCase(store).prepare(request.customer_id, request.amount)


@router.post("/retiros", status_code=201, response_model=CreditNoteResult, summary="Registrar un retiro de saldo a favor")
def confirm_withdrawal(request: WithdrawalRequest, store: InvoiceStore = Depends(get_store)):
    return WithdrawCreditUseCase(store).confirm(
        request.customer_id,
        request.amount,
        refund_method=request.refund_method,
        reason=request.reason,
        refund_reference=request.refund_reference,
        cashier_number=request.cashier_number,
        salesperson=request.salesperson,
    )
