"""
Casos de uso de sincronización SOC -> PostgreSQL.

Orden obligatorio por FKs: empresas -> unidades -> setores -> cargos.

Cada corrida crea su propio acumulador (SyncStatistics) y lo pasa de etapa
en etapa; la instancia solo guarda una copia de la última corrida para
consultarla después.

Errores:
- Fallo al traer una colección completa (o la jerarquía) -> aborta la corrida
  y se propaga al caller.
- Fallo de un registro -> se contabiliza y la etapa continúa.
"""
import asyncio
from typing import Awaitable, Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from soc_sync.application.services.hierarchy_resolver import HierarchyResolver
from soc_sync.application.services.parent_resolution import ParentResolver
from soc_sync.application.services.reconcilers import (
    CompanyReconciler,
    JobReconciler,
    SectorReconciler,
    UnitReconciler,
)
from soc_sync.core.config import SectorNaturalKey, settings
from soc_sync.domain.entities.sync_statistics import SyncRunState, SyncStatistics
from soc_sync.infrastructure.external.soc.soc_client import SocApiClient
from soc_sync.infrastructure.repositories.soc_repositories import (
    SocSectorRepository,
    SocUnitRepository,
)
from soc_sync.shared.exceptions.domain import SyncAlreadyRunningException

T = TypeVar("T")

Stage = Callable[[SyncStatistics], Awaitable[SyncStatistics]]

# Una sola corrida a la vez por proceso
_run_lock = asyncio.Lock()


def group_by_company(records: Iterable[T]) -> Dict[str, List[T]]:
    """Agrupa por CODIGOEMPRESA conservando el orden de primera aparición."""
    grouped: Dict[str, List[T]] = {}
    for record in records:
        grouped.setdefault(record.company_code, []).append(record)
    return grouped


class SocSyncUseCases:
    """
    Orquestador de la sincronización SOC.

    Uso:
        use_cases = SocSyncUseCases(db, build_soc_client())
        stats = await use_cases.sync_all()
    """

    _last_statistics: Optional[SyncStatistics] = None

    def __init__(
        self,
        db: AsyncSession,
        client: SocApiClient,
        *,
        sector_natural_key: Optional[SectorNaturalKey] = None,
        units_active_only: Optional[bool] = None,
    ):
        self.db = db
        self.client = client
        self.units_active_only = (
            settings.SOC_UNITS_ACTIVE_ONLY if units_active_only is None else units_active_only
        )

        units_repo = SocUnitRepository(db)
        sectors_repo = SocSectorRepository(db, sector_natural_key or settings.SOC_SECTOR_NATURAL_KEY)
        resolver = ParentResolver.default(units_repo, sectors_repo)

        self.company_reconciler = CompanyReconciler(db)
        self.unit_reconciler = UnitReconciler(db)
        self.sector_reconciler = SectorReconciler(db, sectors_repo, resolver)
        self.job_reconciler = JobReconciler(db, resolver)

    # =========================================================================
    # Entradas públicas
    # =========================================================================

    async def sync_all(self) -> SyncStatistics:
        """Sincronización completa en orden de dependencias."""
        logger.info("Iniciando sincronización completa SOC...")
        return await self._run(
            [self._sync_companies, self._sync_units, self._sync_sectors, self._sync_jobs]
        )

    async def sync_companies(self, stats: Optional[SyncStatistics] = None) -> SyncStatistics:
        if stats is not None:
            return await self._sync_companies(stats)
        return await self._run([self._sync_companies])

    async def sync_units(self, stats: Optional[SyncStatistics] = None) -> SyncStatistics:
        if stats is not None:
            return await self._sync_units(stats)
        return await self._run([self._sync_units])

    async def sync_sectors(self, stats: Optional[SyncStatistics] = None) -> SyncStatistics:
        if stats is not None:
            return await self._sync_sectors(stats)
        return await self._run([self._sync_sectors])

    async def sync_jobs(self, stats: Optional[SyncStatistics] = None) -> SyncStatistics:
        if stats is not None:
            return await self._sync_jobs(stats)
        return await self._run([self._sync_jobs])

    def get_statistics(self) -> Optional[SyncStatistics]:
        """Copia de las estadísticas de la última corrida terminada o abortada."""
        last = SocSyncUseCases._last_statistics
        return last.snapshot() if last is not None else None

    # =========================================================================
    # Corrida
    # =========================================================================

    async def _run(self, stages: Sequence[Stage]) -> SyncStatistics:
        if _run_lock.locked():
            raise SyncAlreadyRunningException()

        async with _run_lock:
            stats = SyncStatistics()
            try:
                for stage in stages:
                    stats = await stage(stats)
                stats.mark_completed()
                logger.success(
                    f"Sincronización SOC completada: empresas={stats.companies.to_dict()} "
                    f"unidades={stats.units.to_dict()} setores={stats.sectors.to_dict()} "
                    f"cargos={stats.jobs.to_dict()} errores={len(stats.errors)}"
                )
                return stats
            except Exception as e:
                logger.error(f"Sincronización SOC abortada en {stats.state.value}: {e}")
                stats.mark_failed(e)
                raise
            finally:
                SocSyncUseCases._last_statistics = stats.snapshot()

    # =========================================================================
    # Etapas
    # =========================================================================

    async def _sync_companies(self, stats: SyncStatistics) -> SyncStatistics:
        stats.state = SyncRunState.FETCH_COMPANIES
        logger.info("Consultando empresas en el SOC...")
        records = await self.client.fetch_companies()
        logger.info(f"{len(records)} empresa(s) encontradas")

        stats.state = SyncRunState.RECONCILE_COMPANIES
        for record in records:
            stats.record(await self.company_reconciler.reconcile(record))
        return stats

    async def _sync_units(self, stats: SyncStatistics) -> SyncStatistics:
        stats.state = SyncRunState.FETCH_UNITS
        logger.info("Consultando unidades en el SOC...")
        records = await self.client.fetch_units(active_only=self.units_active_only)
        logger.info(f"{len(records)} unidade(s) encontradas")

        stats.state = SyncRunState.RECONCILE_UNITS
        for record in records:
            stats.record(await self.unit_reconciler.reconcile(record))
        return stats

    async def _sync_sectors(self, stats: SyncStatistics) -> SyncStatistics:
        stats.state = SyncRunState.FETCH_SECTORS
        logger.info("Consultando setores en el SOC...")
        records = await self.client.fetch_sectors()
        logger.info(f"{len(records)} setor(es) encontrados")

        hierarchy = HierarchyResolver(self.client)
        for company_code, company_records in group_by_company(records).items():
            logger.info(f"Procesando {len(company_records)} setor(es) de la empresa {company_code}")
            stats.state = SyncRunState.HIERARCHY_LOOKUP_SECTORS
            maps = await hierarchy.maps_for(company_code)

            stats.state = SyncRunState.RECONCILE_SECTORS
            for record in company_records:
                stats.record(await self.sector_reconciler.reconcile(record, maps))
        return stats

    async def _sync_jobs(self, stats: SyncStatistics) -> SyncStatistics:
        stats.state = SyncRunState.FETCH_JOBS
        logger.info("Consultando cargos en el SOC...")
        records = await self.client.fetch_jobs()
        logger.info(f"{len(records)} cargo(s) encontrados")

        hierarchy = HierarchyResolver(self.client)
        for company_code, company_records in group_by_company(records).items():
            logger.info(f"Procesando {len(company_records)} cargo(s) de la empresa {company_code}")
            stats.state = SyncRunState.HIERARCHY_LOOKUP_JOBS
            maps = await hierarchy.maps_for(company_code)

            stats.state = SyncRunState.RECONCILE_JOBS
            for record in company_records:
                stats.record(await self.job_reconciler.reconcile(record, maps))
        return stats
