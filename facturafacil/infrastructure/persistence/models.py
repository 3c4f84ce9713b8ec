# facturafacil/infrastructure/persistence/models.py
from sqlalchemy import JSON, Column, Integer, String

from .database import Base


class Cliente(Base):
    __tablename__ = "clientes"

    id = Column(String, primary_key=True)
    rif = Column(String, index=True)
    datos = Column(JSON, nullable=False)


class Factura(Base):
    __tablename__ = "facturas"

    id = Column(String, primary_key=True)
    # Orden de inserción del documento en el historial
    posicion = Column(Integer, nullable=False, index=True)
    numero = Column(String, index=True)
    cliente_id = Column(String, index=True)
    datos = Column(JSON, nullable=False)


class Empresa(Base):
    __tablename__ = "empresa"

    id = Column(String, primary_key=True)
    datos = Column(JSON, nullable=False)
