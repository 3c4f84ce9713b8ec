# facturafacil/domain/models/customer.py
from pydantic import BaseModel, ConfigDict, EmailStr, field_validator
from pydantic.alias_generators import to_camel
from typing import Literal, Optional

DEFAULT_COMPANY_ID = "main_company_details"


def blank_email_to_none(v):
    # El formulario envía "" cuando no se indica correo
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class CompanyDetails(BaseModel):
    """
    Datos fiscales de la empresa emisora. Existe una sola fila por instalación.
    """
    id: str = DEFAULT_COMPANY_ID
    name: str = ""
    rif: str = ""
    address: str = ""
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    logo_url: Optional[str] = None
    logo_alignment: Literal["left", "center", "right"] = "center"
    fiscal_printer_enabled: bool = False
    fiscal_printer_api_url: Optional[str] = None

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("email", mode="before")
    @classmethod
    def parse_email(cls, v):
        return blank_email_to_none(v)


class CustomerDetails(BaseModel):
    """
    Cliente registrado y su estado financiero.

    `outstanding_balance` es lo que el cliente le debe al negocio y
    `credit_balance` el saldo a favor que el negocio le debe al cliente.
    Ambos saldos nunca son negativos una vez liquidado un documento.
    """
    id: str = ""
    name: str = ""
    rif: str = ""
    address: str = ""
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    outstanding_balance: float = 0.0
    credit_balance: float = 0.0

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    @field_validator("email", mode="before")
    @classmethod
    def parse_email(cls, v):
        return blank_email_to_none(v)

    @field_validator("outstanding_balance", "credit_balance", mode="before")
    @classmethod
    def parse_balance(cls, v):
        # Los registros antiguos guardaban saldos ausentes como null
        return 0.0 if v is None else v

    @property
    def is_registered(self) -> bool:
        return bool(self.id)
