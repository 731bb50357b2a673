"""
Dependencias para inyeccion de casos de uso.
"""
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from soc_sync.application.use_cases.soc_sync_use_cases import SocSyncUseCases
from soc_sync.infrastructure.database.session import get_db
from soc_sync.infrastructure.external.soc.soc_client import build_soc_client


async def get_soc_sync_use_cases(
    db: AsyncSession = Depends(get_db)
) -> SocSyncUseCases:
    """
    Dependencia para obtener los casos de uso de sincronizacion SOC.

    Args:
        db: Sesion de base de datos

    Returns:
        SocSyncUseCases: Orquestador con el cliente SOC configurado por settings
    """
    return SocSyncUseCases(db, build_soc_client())
