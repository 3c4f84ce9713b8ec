# facturafacil/domain/services/numbering.py
from datetime import datetime


def epoch_millis(now: datetime) -> int:
    return int(now.timestamp() * 1000)


def generate_document_number(prefix: str, now: datetime) -> str:
    """
    Número legible del documento: prefijo + últimos seis dígitos de la marca
    de tiempo en milisegundos (ej. FACT-482913). No garantiza unicidad global.
    """
    return f"{prefix}-{str(epoch_millis(now))[-6:]}"
