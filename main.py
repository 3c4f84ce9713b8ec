# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
# Importamos los routers de la capa de infraestructura
from facturafacil.infrastructure.api.error_handlers import register_exception_handlers
from facturafacil.infrastructure.api.routers import company_router, customers_router, invoices_router, returns_router
from facturafacil.infrastructure.persistence import models  # noqa: F401  registra las tablas en Base
from facturafacil.infrastructure.persistence.database import Base, engine

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s')


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="API de FacturaFácil",
    description="Facturación para pequeños negocios: ventas, abonos, saldos a favor y notas de crédito.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(company_router.router)
app.include_router(customers_router.router)
app.include_router(invoices_router.router)
app.include_router(returns_router.router)


@app.get("/", tags=["Health Check"])
def read_root():
    return {"status": "ok", "message": "Bienvenido a la API de FacturaFácil"}
