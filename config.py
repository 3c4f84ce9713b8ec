# config.py
import os

from dotenv import load_dotenv

load_dotenv()

# --- BASE DE DATOS ---
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./facturafacil.db")

# --- IMPRESORA FISCAL ---
# URL del puente local; se usa cuando la empresa no define una propia
FISCAL_PRINTER_API_URL = os.getenv("FISCAL_PRINTER_API_URL", "http://localhost:3000/print")
FISCAL_PRINTER_TIMEOUT = float(os.getenv("FISCAL_PRINTER_TIMEOUT", "15"))

# --- CELERY ---
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")

# --- CORS ---
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
