"""
Resolucion de jerarquia por nombre (feed HIERARCHY del SOC).

El SOC no informa el padre de setores y cargos por codigo; solo el feed de
jerarquia los relaciona por NOMBRE. Aqui se construyen, por empresa, dos
mapas de solo lectura que viven lo que dura una etapa de la sincronizacion:

- sector_to_unit: NOMESETOR -> NOMEUNIDADE
- job_to_parents: NOMECARGO -> (NOMEUNIDADE, NOMESETOR)

Nombres duplicados: gana el ultimo registro del feed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Protocol

from loguru import logger

from soc_sync.infrastructure.external.soc.types import SocHierarchyRecord


@dataclass(frozen=True)
class JobParents:
    unit_name: str
    sector_name: str


@dataclass(frozen=True)
class HierarchyMaps:
    company_code: str
    sector_to_unit: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    job_to_parents: Mapping[str, JobParents] = field(default_factory=lambda: MappingProxyType({}))


def build_hierarchy_maps(company_code: str, records: Iterable[SocHierarchyRecord]) -> HierarchyMaps:
    """Construye los mapas nombre->nombre de una empresa (funcion pura)."""
    sector_to_unit: dict[str, str] = {}
    job_to_parents: dict[str, JobParents] = {}
    for rec in records:
        if rec.sector_name:
            sector_to_unit[rec.sector_name] = rec.unit_name
        if rec.job_name:
            job_to_parents[rec.job_name] = JobParents(
                unit_name=rec.unit_name, sector_name=rec.sector_name
            )
    return HierarchyMaps(
        company_code=company_code,
        sector_to_unit=MappingProxyType(sector_to_unit),
        job_to_parents=MappingProxyType(job_to_parents),
    )


class HierarchySource(Protocol):
    async def fetch_hierarchy(self, company_code: str) -> list[SocHierarchyRecord]: ...


class HierarchyResolver:
    """
    Cache perezoso de HierarchyMaps por empresa.

    Se crea uno por etapa: cada empresa se consulta como mucho una vez.
    Un fallo del feed se propaga (fallo de orquestacion).
    """

    def __init__(self, source: HierarchySource) -> None:
        self._source = source
        self._cache: dict[str, HierarchyMaps] = {}

    async def maps_for(self, company_code: str) -> HierarchyMaps:
        cached = self._cache.get(company_code)
        if cached is not None:
            return cached

        logger.info(f"Consultando jerarquia SOC de la empresa {company_code}...")
        records = await self._source.fetch_hierarchy(company_code)
        maps = build_hierarchy_maps(company_code, records)
        logger.info(
            f"Jerarquia empresa {company_code}: {len(maps.sector_to_unit)} setor(es), "
            f"{len(maps.job_to_parents)} cargo(s) mapeados"
        )
        self._cache[company_code] = maps
        return maps

    @property
    def fetched_companies(self) -> tuple[str, ...]:
        return tuple(self._cache)
