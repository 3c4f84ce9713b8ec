# facturafacil/infrastructure/persistence/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

import config

# SQLite requiere permitir el uso de la conexión desde otros hilos (FastAPI / Celery)
connect_args = {"check_same_thread": False} if config.DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(config.DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()
