"""
Endpoints para sincronizar la jerarquía organizacional desde el SOC.

POST /soc/sync            -> empresas, unidades, setores y cargos (en ese orden)
POST /soc/sync/{entidad}  -> una sola entidad
GET  /soc/sync/statistics -> estadísticas de la última corrida
"""
from typing import Awaitable, Callable

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger

from soc_sync.api.v1.dependencies.use_case_deps import get_soc_sync_use_cases
from soc_sync.application.dto.soc_sync_dto import (
    EntitySyncResponseDTO,
    EntitySyncStatisticsDTO,
    SyncResponseDTO,
    SyncStatisticsDTO,
)
from soc_sync.application.use_cases.soc_sync_use_cases import SocSyncUseCases
from soc_sync.domain.entities.sync_statistics import SyncEntity, SyncStatistics
from soc_sync.shared.exceptions.base import AppException
from soc_sync.shared.exceptions.domain import StatisticsNotAvailableException


router = APIRouter(prefix="/soc", tags=["SOC Sync"])


async def _run_entity_sync(
    run: Callable[[], Awaitable[SyncStatistics]],
    entity: SyncEntity,
    label: str,
) -> EntitySyncResponseDTO:
    try:
        logger.info(f"Iniciando sincronizacion SOC de {label} desde API")
        stats = await run()
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error en sincronizacion SOC de {label}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al sincronizar {label} desde el SOC: {str(e)}"
        )

    return EntitySyncResponseDTO(
        success=True,
        message=f"Sincronizacion de {label} completada",
        statistics=EntitySyncStatisticsDTO.from_statistics(stats, entity),
    )


@router.post(
    "/sync",
    response_model=SyncResponseDTO,
    status_code=status.HTTP_200_OK,
    summary="Sincronizar toda la jerarquia desde el SOC"
)
async def sync_all(
    use_cases: SocSyncUseCases = Depends(get_soc_sync_use_cases)
) -> SyncResponseDTO:
    """
    Ejecuta la sincronizacion completa SOC -> PostgreSQL.

    - Orden: empresas -> unidades -> setores -> cargos
    - Los fallos por registro se informan en `statistics.errors`
    - Un fallo al consultar el SOC aborta la corrida y responde 500
    """
    try:
        logger.info("Iniciando sincronizacion completa SOC desde API")
        stats = await use_cases.sync_all()
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Error en sincronizacion SOC: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error al sincronizar desde el SOC: {str(e)}"
        )

    return SyncResponseDTO(
        success=True,
        message="Sincronizacion SOC completada",
        statistics=SyncStatisticsDTO.from_statistics(stats),
    )


@router.post("/sync/companies", response_model=EntitySyncResponseDTO, summary="Sincronizar empresas")
async def sync_companies(
    use_cases: SocSyncUseCases = Depends(get_soc_sync_use_cases)
) -> EntitySyncResponseDTO:
    return await _run_entity_sync(use_cases.sync_companies, SyncEntity.COMPANY, "empresas")


@router.post("/sync/units", response_model=EntitySyncResponseDTO, summary="Sincronizar unidades")
async def sync_units(
    use_cases: SocSyncUseCases = Depends(get_soc_sync_use_cases)
) -> EntitySyncResponseDTO:
    return await _run_entity_sync(use_cases.sync_units, SyncEntity.UNIT, "unidades")


@router.post("/sync/sectors", response_model=EntitySyncResponseDTO, summary="Sincronizar setores")
async def sync_sectors(
    use_cases: SocSyncUseCases = Depends(get_soc_sync_use_cases)
) -> EntitySyncResponseDTO:
    return await _run_entity_sync(use_cases.sync_sectors, SyncEntity.SECTOR, "setores")


@router.post("/sync/jobs", response_model=EntitySyncResponseDTO, summary="Sincronizar cargos")
async def sync_jobs(
    use_cases: SocSyncUseCases = Depends(get_soc_sync_use_cases)
) -> EntitySyncResponseDTO:
    return await _run_entity_sync(use_cases.sync_jobs, SyncEntity.JOB, "cargos")


@router.get("/sync/statistics", response_model=SyncStatisticsDTO, summary="Estadisticas de la ultima corrida")
async def get_statistics(
    use_cases: SocSyncUseCases = Depends(get_soc_sync_use_cases)
) -> SyncStatisticsDTO:
    stats = use_cases.get_statistics()
    if stats is None:
        raise StatisticsNotAvailableException()
    return SyncStatisticsDTO.from_statistics(stats)
