"""
Engine y sesiones del espejo SOC (tablas soc_*).

Los reconciliadores hacen commit por registro sobre la sesion que reciben;
get_db solo cierra lo que quede pendiente al final de la peticion.
"""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker
)
from sqlalchemy.orm import declarative_base

from soc_sync.core.config import settings


Base = declarative_base()


def engine_kwargs(database_url: str, *, echo: bool = False) -> dict:
    """
    Argumentos de create_async_engine para la URL dada.

    Con asyncpg se dimensiona el pool (una sincronizacion usa una sola
    conexion, el resto queda para la API); aiosqlite va sin pool.
    """
    kwargs = {"echo": echo, "future": True}
    if database_url.startswith("postgresql"):
        kwargs.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,
        })
    return kwargs


engine = create_async_engine(
    settings.effective_database_url,
    **engine_kwargs(settings.effective_database_url, echo=settings.DEBUG),
)

# expire_on_commit=False: los ids de filas ya confirmadas se siguen leyendo
# despues del commit por registro
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Sesion por peticion para los endpoints de /soc-sync."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def init_db() -> None:
    """Crea soc_companies, soc_units, soc_sectors y soc_jobs si faltan."""
    from soc_sync.infrastructure.database import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
