"""
Dobles y builders compartidos por los tests de sincronización SOC.
"""
from typing import Dict, List

from soc_sync.infrastructure.external.soc.soc_client import SocApiError
from soc_sync.infrastructure.external.soc.types import (
    SocCompanyRecord,
    SocHierarchyRecord,
    SocJobRecord,
    SocSectorRecord,
    SocUnitRecord,
)


class FakeSocClient:
    """
    Doble del SocApiClient: devuelve colecciones en memoria y registra
    cuántas veces se pidió la jerarquía de cada empresa.
    """

    def __init__(self) -> None:
        self.companies: List[dict] = []
        self.units: List[dict] = []
        self.sectors: List[dict] = []
        self.jobs: List[dict] = []
        self.hierarchy: Dict[str, List[dict]] = {}
        self.hierarchy_calls: List[str] = []
        self.units_active_only: List[bool] = []
        self.fail_on: Dict[str, str] = {}

    def _maybe_fail(self, name: str) -> None:
        if name in self.fail_on:
            raise SocApiError(self.fail_on[name], url=f"https://soc.test/{name}")

    async def fetch_companies(self) -> List[SocCompanyRecord]:
        self._maybe_fail("companies")
        return [SocCompanyRecord.model_validate(r) for r in self.companies]

    async def fetch_units(self, active_only: bool = False) -> List[SocUnitRecord]:
        self._maybe_fail("units")
        self.units_active_only.append(active_only)
        return [SocUnitRecord.model_validate(r) for r in self.units]

    async def fetch_sectors(self) -> List[SocSectorRecord]:
        self._maybe_fail("sectors")
        return [SocSectorRecord.model_validate(r) for r in self.sectors]

    async def fetch_jobs(self) -> List[SocJobRecord]:
        self._maybe_fail("jobs")
        return [SocJobRecord.model_validate(r) for r in self.jobs]

    async def fetch_hierarchy(self, company_code: str) -> List[SocHierarchyRecord]:
        self.hierarchy_calls.append(company_code)
        self._maybe_fail("hierarchy")
        return [SocHierarchyRecord.model_validate(r) for r in self.hierarchy.get(company_code, [])]


# =============================================================================
# Builders de registros SOC (nombres de campo originales)
# =============================================================================

def company(code: str, name: str, active: str = "1", **extra) -> dict:
    return {"CODIGO": code, "NOMEABREVIADO": name, "ATIVO": active, **extra}


def unit(company_code: str, code: str, name: str, active: str = "1", **extra) -> dict:
    return {
        "CODIGOEMPRESA": company_code,
        "CODIGOUNIDADE": code,
        "NOMEUNIDADE": name,
        "UNIDADEATIVA": active,
        **extra,
    }


def sector(company_code: str, code: str, name: str, active: str = "1") -> dict:
    return {
        "CODIGOEMPRESA": company_code,
        "CODIGOSETOR": code,
        "NOMESETOR": name,
        "SETORATIVO": active,
    }


def job(company_code: str, code: str, name: str, active: str = "1", **extra) -> dict:
    return {
        "CODIGOEMPRESA": company_code,
        "CODIGOCARGO": code,
        "NOMECARGO": name,
        "CARGOATIVO": active,
        **extra,
    }


def hierarchy_row(unit_name: str, sector_name: str, job_name: str = "") -> dict:
    return {"NOMEUNIDADE": unit_name, "NOMESETOR": sector_name, "NOMECARGO": job_name}
