# facturafacil/domain/constants.py

# --- MÉTODOS DE PAGO CON SIGNIFICADO CONTABLE ---
CREDIT_METHOD = "Saldo a Favor"
AUTO_CREDIT_METHOD = "Saldo a Favor (Auto)"
CREDIT_METHODS = (CREDIT_METHOD, AUTO_CREDIT_METHOD)
# Forma de reintegro de una nota de crédito que abona el total al saldo del cliente
CREDIT_TO_ACCOUNT_METHOD = "Crédito a Cuenta Cliente"

# --- VALORES POR DEFECTO DEL EDITOR ---
DEFAULT_TAX_RATE = 16.0
DEFAULT_THANK_YOU_MESSAGE = "¡Gracias por su compra!"
DEBT_PAYMENT_THANK_YOU = "Gracias por su abono."
CREDIT_DEPOSIT_THANK_YOU = "Gracias por su depósito."
NO_WARRANTY = "no_aplica"

# --- ARTÍCULOS SINTÉTICOS ---
DEBT_PAYMENT_ITEM = "Abono a Deuda Pendiente"
CREDIT_DEPOSIT_ITEM = "Depósito a Cuenta Cliente"
CREDIT_WITHDRAWAL_ITEM = "Retiro de Saldo a Favor"

# --- PREFIJOS DE NUMERACIÓN ---
SALE_PREFIX = "FACT"
DEBT_PAYMENT_PREFIX = "PAGO"
CREDIT_DEPOSIT_PREFIX = "DEP"
CREDIT_NOTE_PREFIX = "NC"
WITHDRAWAL_NOTE_PREFIX = "NC-RETIRO"
WITHDRAWAL_PREVIEW_PREFIX = "RETIRO"
SYNTHETIC_ID_PREFIX = "SYNTHETIC"
WITHDRAWAL_LINK_PREFIX = "CW"

# Diferencia máxima admitida entre el vuelto entregado y el sobrepago
REFUND_TOLERANCE = 0.001
