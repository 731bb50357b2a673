"""
Reconciliadores por entidad: un registro del SOC -> un upsert local.

Reglas comunes:
- Match por clave natural; si existe se sobrescriben todos los campos
  (id y created_at se conservan), si no se inserta con id nuevo.
- Cada registro es su propia transaccion: commit al terminar, rollback si falla.
- Nunca relanzan: cualquier fallo del registro se convierte en un
  ReconcileResult fallido y la etapa sigue con el siguiente.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from soc_sync.application.services.hierarchy_resolver import HierarchyMaps
from soc_sync.application.services.parent_resolution import ParentResolver
from soc_sync.domain.entities.sync_statistics import ReconcileResult, SyncEntity
from soc_sync.infrastructure.external.soc.types import (
    SocCompanyRecord,
    SocJobRecord,
    SocSectorRecord,
    SocUnitRecord,
)
from soc_sync.infrastructure.repositories.soc_repositories import (
    SocCompanyRepository,
    SocJobRepository,
    SocSectorRepository,
    SocUnitRepository,
)
from soc_sync.shared.exceptions.domain import ParentNotFoundException
from soc_sync.shared.utils.datetime_utils import DateTimeUtils


def _or_none(value: str) -> Optional[str]:
    return value or None


def company_row(record: SocCompanyRecord, *, now: datetime) -> dict[str, Any]:
    return {
        "soc_code": record.code,
        "name": record.short_name,
        "company_name": _or_none(record.legal_name),
        "cnpj": _or_none(record.cnpj),
        "address": _or_none(record.address),
        "city": _or_none(record.city),
        "state": _or_none(record.state),
        "zip_code": _or_none(record.zip_code),
        "active": record.active,
        "updated_at": now,
    }


def unit_row(record: SocUnitRecord, *, company_id: str, now: datetime) -> dict[str, Any]:
    return {
        "soc_code": record.code,
        "soc_company_code": record.company_code,
        "name": record.name,
        "company_name": _or_none(record.legal_name),
        "cnpj": _or_none(record.cnpj),
        "cpf": _or_none(record.cpf),
        "address": _or_none(record.address),
        "risk_degree": _or_none(record.risk_degree),
        "company_id": company_id,
        "active": record.active,
        "updated_at": now,
    }


def sector_row(record: SocSectorRecord, *, unit_id: str, now: datetime) -> dict[str, Any]:
    return {
        "soc_code": record.code,
        "soc_company_code": record.company_code,
        "name": record.name,
        "unit_id": unit_id,
        "active": record.active,
        "updated_at": now,
    }


def job_row(record: SocJobRecord, *, sector_id: str, now: datetime) -> dict[str, Any]:
    return {
        "soc_code": record.code,
        "soc_company_code": record.company_code,
        "name": record.name,
        "detailed_description": _or_none(record.detailed_description),
        "cbo": _or_none(record.cbo),
        "sector_id": sector_id,
        "active": record.active,
        "updated_at": now,
    }


class _Reconciler:
    entity: SyncEntity

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _upsert(self, repo, existing, data: dict[str, Any], code: str, notes=()) -> ReconcileResult:
        if existing is not None:
            await repo.update(existing, data)
            return ReconcileResult.updated(self.entity, code, existing.id, tuple(notes))
        created = await repo.create({**data, "created_at": data["updated_at"]})
        return ReconcileResult.created(self.entity, code, created.id, tuple(notes))

    async def _guarded(self, code: str, work: Callable[[], Awaitable[ReconcileResult]]) -> ReconcileResult:
        """Frontera de error por registro: commit o rollback + resultado fallido."""
        try:
            result = await work()
            await self.db.commit()
        except ParentNotFoundException as e:
            await self.db.rollback()
            logger.error(f"No se pudo sincronizar {self.entity.value} {code}: {e.message}")
            return ReconcileResult.failed(self.entity, code, e.message, e.notes)
        except Exception as e:
            await self.db.rollback()
            logger.error(f"No se pudo sincronizar {self.entity.value} {code}: {e}")
            return ReconcileResult.failed(self.entity, code, str(e) or type(e).__name__)

        for note in result.notes:
            logger.warning(note)
        return result


class CompanyReconciler(_Reconciler):
    entity = SyncEntity.COMPANY

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.companies = SocCompanyRepository(db)

    async def reconcile(self, record: SocCompanyRecord) -> ReconcileResult:
        async def work() -> ReconcileResult:
            existing = await self.companies.get_by_soc_code(record.code)
            data = company_row(record, now=DateTimeUtils.now_utc())
            return await self._upsert(self.companies, existing, data, record.code)

        return await self._guarded(record.code, work)


class UnitReconciler(_Reconciler):
    """
    Politica: se persisten todas las unidades (activas o no) reflejando
    UNIDADEATIVA; la clave natural es CODIGOUNIDADE + CODIGOEMPRESA.
    """

    entity = SyncEntity.UNIT

    def __init__(self, db: AsyncSession):
        super().__init__(db)
        self.companies = SocCompanyRepository(db)
        self.units = SocUnitRepository(db)

    async def reconcile(self, record: SocUnitRecord) -> ReconcileResult:
        async def work() -> ReconcileResult:
            company = await self.companies.get_by_soc_code(record.company_code)
            if company is None:
                raise ParentNotFoundException(
                    f"Empresa con código SOC {record.company_code} no encontrada",
                    entity=self.entity.value,
                    code=record.code,
                )
            existing = await self.units.get_by_natural_key(record.code, record.company_code)
            data = unit_row(record, company_id=company.id, now=DateTimeUtils.now_utc())
            return await self._upsert(self.units, existing, data, record.code)

        return await self._guarded(record.code, work)


class SectorReconciler(_Reconciler):
    entity = SyncEntity.SECTOR

    def __init__(self, db: AsyncSession, sectors: SocSectorRepository, resolver: ParentResolver):
        super().__init__(db)
        self.sectors = sectors
        self.resolver = resolver

    async def reconcile(self, record: SocSectorRecord, maps: HierarchyMaps) -> ReconcileResult:
        async def work() -> ReconcileResult:
            resolution = await self.resolver.unit_for_sector(record, maps)
            if not resolution.resolved:
                raise ParentNotFoundException(
                    f"No hay unidades para la empresa {record.company_code}",
                    entity=self.entity.value,
                    code=record.code,
                    notes=resolution.notes,
                )
            existing = await self.sectors.get_by_natural_key(
                soc_code=record.code,
                soc_company_code=record.company_code,
                name=record.name,
                active=record.active,
            )
            data = sector_row(record, unit_id=resolution.parent_id, now=DateTimeUtils.now_utc())
            return await self._upsert(self.sectors, existing, data, record.code, resolution.notes)

        return await self._guarded(record.code, work)


class JobReconciler(_Reconciler):
    entity = SyncEntity.JOB

    def __init__(self, db: AsyncSession, resolver: ParentResolver):
        super().__init__(db)
        self.jobs = SocJobRepository(db)
        self.resolver = resolver

    async def reconcile(self, record: SocJobRecord, maps: HierarchyMaps) -> ReconcileResult:
        async def work() -> ReconcileResult:
            resolution = await self.resolver.sector_for_job(record, maps)
            if not resolution.resolved:
                raise ParentNotFoundException(
                    f"No hay setores para la empresa {record.company_code}",
                    entity=self.entity.value,
                    code=record.code,
                    notes=resolution.notes,
                )
            existing = await self.jobs.get_by_soc_code(record.code)
            data = job_row(record, sector_id=resolution.parent_id, now=DateTimeUtils.now_utc())
            return await self._upsert(self.jobs, existing, data, record.code, resolution.notes)

        return await self._guarded(record.code, work)
