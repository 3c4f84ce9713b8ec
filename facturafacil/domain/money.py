# facturafacil/domain/money.py

# Por debajo de este monto una diferencia se considera cero.
MONEY_EPSILON = 0.001

CURRENCY_SYMBOL = "Bs. "


def round_money(amount) -> float:
    """Redondea un monto a céntimos (sin devolver -0.0)."""
    return round(float(amount or 0.0), 2) + 0.0


def format_currency(amount) -> str:
    if amount is None:
        amount = 0.0
    return f"{CURRENCY_SYMBOL}{'{:,.2f}'.format(amount)}"
