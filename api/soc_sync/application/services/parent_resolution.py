"""
Estrategias para resolver el padre local de setores y cargos.

El SOC no trae la FK de setor->unidade ni de cargo->setor, asi que se prueba
en orden:

1. HierarchyLookup: mapas por nombre del feed de jerarquia.
2. FirstSiblingFallback: primer hermano de la empresa (heuristica).

Cada estrategia se puede testear por separado; ParentResolver las encadena y
junta las notas de diagnostico (no fatales) de cada intento.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence

from soc_sync.application.services.hierarchy_resolver import HierarchyMaps
from soc_sync.infrastructure.external.soc.types import SocJobRecord, SocSectorRecord
from soc_sync.infrastructure.repositories.soc_repositories import (
    SocSectorRepository,
    SocUnitRepository,
)


@dataclass(frozen=True)
class StrategyOutcome:
    parent_id: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class ParentResolution:
    parent_id: Optional[str]
    strategy: Optional[str]
    notes: tuple[str, ...] = ()

    @property
    def resolved(self) -> bool:
        return self.parent_id is not None


class ParentResolutionStrategy(ABC):
    """Contrato de una estrategia de resolucion de padres."""

    name: str

    @abstractmethod
    async def unit_for_sector(self, sector: SocSectorRecord, maps: HierarchyMaps) -> StrategyOutcome:
        """Retorna el id de la unidade padre del setor, o un outcome vacio."""

    @abstractmethod
    async def sector_for_job(self, job: SocJobRecord, maps: HierarchyMaps) -> StrategyOutcome:
        """Retorna el id del setor padre del cargo, o un outcome vacio."""


class HierarchyLookup(ParentResolutionStrategy):
    """
    Resuelve por nombre usando el feed de jerarquia de la empresa.
    Para setores solo cuentan unidades activas; para cargos la unidade
    se busca por nombre sin mirar el flag.
    """

    name = "hierarchy_lookup"

    def __init__(self, units: SocUnitRepository, sectors: SocSectorRepository):
        self._units = units
        self._sectors = sectors

    async def unit_for_sector(self, sector: SocSectorRecord, maps: HierarchyMaps) -> StrategyOutcome:
        unit_name = maps.sector_to_unit.get(sector.name)
        if unit_name is None:
            return StrategyOutcome()

        unit = await self._units.find_active_by_name(unit_name, sector.company_code)
        if unit is None:
            return StrategyOutcome(
                note=f'Unidade "{unit_name}" no encontrada para el setor "{sector.name}"'
            )
        return StrategyOutcome(parent_id=unit.id)

    async def sector_for_job(self, job: SocJobRecord, maps: HierarchyMaps) -> StrategyOutcome:
        parents = maps.job_to_parents.get(job.name)
        if parents is None:
            return StrategyOutcome()

        unit = await self._units.find_by_name(parents.unit_name, job.company_code)
        if unit is None:
            return StrategyOutcome(
                note=f'Unidade "{parents.unit_name}" no encontrada para el cargo "{job.name}"'
            )

        sector = await self._sectors.find_by_name_in_unit(parents.sector_name, unit.id, job.company_code)
        if sector is None:
            return StrategyOutcome(
                note=(
                    f'Setor "{parents.sector_name}" no encontrado en la unidade '
                    f'"{parents.unit_name}" para el cargo "{job.name}"'
                )
            )
        return StrategyOutcome(parent_id=sector.id)


class FirstSiblingFallback(ParentResolutionStrategy):
    """
    Heuristica: primer padre posible de la empresa.
    - setor: primera unidade ACTIVA de la empresa
    - cargo: primer setor de la empresa (activo o no)
    Orden determinista por created_at, id.
    """

    name = "first_sibling_fallback"

    def __init__(self, units: SocUnitRepository, sectors: SocSectorRepository):
        self._units = units
        self._sectors = sectors

    async def unit_for_sector(self, sector: SocSectorRecord, maps: HierarchyMaps) -> StrategyOutcome:
        unit = await self._units.first_active_for_company(sector.company_code)
        if unit is None:
            return StrategyOutcome()
        return StrategyOutcome(
            parent_id=unit.id,
            note=f'Setor "{sector.name}": se usa la primera unidade activa de la empresa como fallback',
        )

    async def sector_for_job(self, job: SocJobRecord, maps: HierarchyMaps) -> StrategyOutcome:
        sector = await self._sectors.first_for_company(job.company_code)
        if sector is None:
            return StrategyOutcome()
        return StrategyOutcome(
            parent_id=sector.id,
            note=f'Cargo "{job.name}": se usa el primer setor de la empresa como fallback',
        )


class ParentResolver:
    """Prueba las estrategias en orden; la primera que resuelve gana."""

    def __init__(self, strategies: Sequence[ParentResolutionStrategy]):
        if not strategies:
            raise ValueError("ParentResolver requiere al menos una estrategia")
        self._strategies = tuple(strategies)

    @classmethod
    def default(cls, units: SocUnitRepository, sectors: SocSectorRepository) -> "ParentResolver":
        return cls([HierarchyLookup(units, sectors), FirstSiblingFallback(units, sectors)])

    @property
    def strategy_names(self) -> tuple[str, ...]:
        return tuple(s.name for s in self._strategies)

    async def unit_for_sector(self, sector: SocSectorRecord, maps: HierarchyMaps) -> ParentResolution:
        return await self._resolve(lambda s: s.unit_for_sector(sector, maps))

    async def sector_for_job(self, job: SocJobRecord, maps: HierarchyMaps) -> ParentResolution:
        return await self._resolve(lambda s: s.sector_for_job(job, maps))

    async def _resolve(
        self, attempt: Callable[[ParentResolutionStrategy], Awaitable[StrategyOutcome]]
    ) -> ParentResolution:
        notes: list[str] = []
        for strategy in self._strategies:
            outcome = await attempt(strategy)
            if outcome.note:
                notes.append(outcome.note)
            if outcome.parent_id is not None:
                return ParentResolution(outcome.parent_id, strategy.name, tuple(notes))
        return ParentResolution(None, None, tuple(notes))
