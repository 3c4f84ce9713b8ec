# facturafacil/domain/services/ledger.py
from dataclasses import dataclass
from typing import Optional

from facturafacil.domain.models.customer import CustomerDetails
from facturafacil.domain.money import round_money


@dataclass
class CustomerLedger:
    """
    Copia de trabajo de los saldos de un cliente mientras se liquida o
    revierte un documento. Nunca toca el cliente original: el resultado se
    obtiene con `apply_to`, que además recorta ambos saldos a cero.
    """
    outstanding_balance: float = 0.0
    credit_balance: float = 0.0

    @classmethod
    def of(cls, customer: Optional[CustomerDetails]) -> "CustomerLedger":
        if customer is None:
            return cls()
        return cls(
            outstanding_balance=customer.outstanding_balance or 0.0,
            credit_balance=customer.credit_balance or 0.0,
        )

    def add_debt(self, amount: float) -> None:
        self.outstanding_balance = round_money(self.outstanding_balance + amount)

    def reduce_debt(self, amount: float) -> None:
        self.outstanding_balance = round_money(self.outstanding_balance - amount)

    def pay_debt(self, amount: float) -> float:
        """Aplica hasta `amount` a la deuda. Retorna lo efectivamente aplicado."""
        applied = round_money(min(amount, max(0.0, self.outstanding_balance)))
        self.reduce_debt(applied)
        return applied

    def add_credit(self, amount: float) -> None:
        self.credit_balance = round_money(self.credit_balance + amount)

    def use_credit(self, amount: float) -> None:
        self.credit_balance = round_money(self.credit_balance - amount)

    def clamp(self) -> None:
        self.outstanding_balance = max(0.0, round_money(self.outstanding_balance))
        self.credit_balance = max(0.0, round_money(self.credit_balance))

    def apply_to(self, customer: CustomerDetails) -> CustomerDetails:
        self.clamp()
        return customer.model_copy(update={
            "outstanding_balance": self.outstanding_balance,
            "credit_balance": self.credit_balance,
        })
