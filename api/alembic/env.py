"""
Entorno de Alembic para el espejo SOC.

Las migraciones (001_create_soc_tables en adelante) corren en modo sincrono:
la URL de la app usa asyncpg y aqui se cambia el driver a psycopg.
"""
import sys
from pathlib import Path
from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# api/ contiene el paquete soc_sync
API_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(API_DIR))

from soc_sync.core.config import settings
from soc_sync.infrastructure.database.session import Base

# soc_companies, soc_units, soc_sectors, soc_jobs
from soc_sync.infrastructure.database.models import (  # noqa: F401
    SocCompanyModel,
    SocUnitModel,
    SocSectorModel,
    SocJobModel,
)

config = context.config
config.set_main_option(
    "sqlalchemy.url",
    settings.effective_database_url.replace("+asyncpg", "+psycopg"),
)
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """Emite el DDL de las tablas soc_* como SQL, sin conexion."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        # compare_type: detecta cambios como el largo de cnpj o cbo
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
