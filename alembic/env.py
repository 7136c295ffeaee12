# alembic/env.py
from __future__ import annotations

import logging
from pathlib import Path
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import create_engine, pool

ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(ROOT_DIR / ".env")

config = context.config
if config.config_file_name:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

# --- URL de conexión ---
# Misma regla que la app (DATABASE_URL o SQLALCHEMY_DATABASE_URI, SQLite local por defecto);
# sqlalchemy.url de alembic.ini solo si se define explícitamente.
from weekly_survey.core.config import get_settings  # noqa: E402
from weekly_survey.db.base import Base  # noqa: E402
from weekly_survey.db.session import _mask  # noqa: E402

db_url = config.get_main_option("sqlalchemy.url") or get_settings().db_url
context.config.set_main_option("sqlalchemy.url", db_url.replace("%", "%%"))

target_metadata = Base.metadata

logger.info("sqlalchemy.url = %s", _mask(db_url))


# --- Offline / Online runners ---
def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode."""
    context.configure(
        url=db_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=db_url.startswith("sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""
    engine = create_engine(db_url, poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=db_url.startswith("sqlite"),
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
