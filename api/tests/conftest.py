"""
Configuración de fixtures para pytest.
"""
import os

# El engine global se crea al importar soc_sync: apuntarlo a SQLite antes
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from soc_sync.application.use_cases.soc_sync_use_cases import SocSyncUseCases
from soc_sync.infrastructure.database.session import Base
from soc_sync.infrastructure.database import models  # noqa: F401

from soc_fakes import FakeSocClient


# URL de base de datos de prueba
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Fixture que proporciona una sesión de base de datos para tests.
    Crea una base de datos en memoria para cada test.
    """
    # Crear engine de prueba
    engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    # Crear tablas
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Crear session factory
    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    # Proporcionar sesión
    async with async_session() as session:
        yield session

    # Limpiar
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(autouse=True)
def reset_last_statistics():
    """Las estadísticas de la última corrida viven a nivel de clase."""
    SocSyncUseCases._last_statistics = None
    yield
    SocSyncUseCases._last_statistics = None


@pytest.fixture
def soc_client() -> FakeSocClient:
    return FakeSocClient()
