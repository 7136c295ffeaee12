# weekly_survey/db/session.py
import logging
import re

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from weekly_survey.core.config import settings

logger = logging.getLogger(__name__)


def _mask(u: str) -> str:
    """Enmascara la contraseña en la URL para logs seguros"""
    return re.sub(r"://([^:]+):([^@]+)@", r"://\1:***@", u)


def build_engine(db_url: str, **kwargs) -> Engine:
    """
    Crea el engine. SQLite no admite las opciones de pool de Postgres
    y necesita foreign keys activadas por conexión (para ON DELETE CASCADE).
    """
    if db_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        eng = create_engine(db_url, **kwargs)

        @event.listens_for(eng, "connect")
        def _sqlite_fk_on(dbapi_conn, _record):
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON")
            cur.close()

        return eng

    return create_engine(
        db_url,
        pool_size=5,              # 5 conexiones concurrentes
        max_overflow=10,          # Hasta 15 total en picos
        pool_timeout=30,          # 30s para obtener conexión
        pool_recycle=1800,        # Recicla cada 30 min
        pool_pre_ping=True,       # Verifica que la conexión esté viva
        echo=False,
        **kwargs,
    )


db_url = settings.db_url
logger.info("[DB] Using: %s", _mask(db_url))

engine = build_engine(db_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency para FastAPI"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine | None = None) -> None:
    """Crea las tablas que falten (desarrollo / SQLite). En prod usar Alembic."""
    from weekly_survey.db.base import Base

    Base.metadata.create_all(bind=bind or engine)


def check_db_connection() -> bool:
    """Verifica que la conexión funcione"""
    try:
        with engine.connect() as conn:
            row = conn.execute(text("SELECT 1")).fetchone()
            if row and row[0] == 1:
                logger.info("[DB] Connection successful")
                return True
            return False
    except Exception as e:
        logger.error("[DB] Connection failed: %s", e)
        return False
