"""
Tests unitarios para los mapas de jerarquía por nombre.
"""
from __future__ import annotations

import pytest

from soc_sync.application.services.hierarchy_resolver import (
    HierarchyResolver,
    JobParents,
    build_hierarchy_maps,
)
from soc_sync.infrastructure.external.soc.types import SocHierarchyRecord

from soc_fakes import hierarchy_row


def _records(*rows: dict) -> list[SocHierarchyRecord]:
    return [SocHierarchyRecord.model_validate(r) for r in rows]


def test_build_maps_sector_and_job() -> None:
    maps = build_hierarchy_maps(
        "1",
        _records(
            hierarchy_row("HQ", "Finance", "Analyst"),
            hierarchy_row("Plant", "Production", ""),
        ),
    )

    assert maps.company_code == "1"
    assert maps.sector_to_unit == {"Finance": "HQ", "Production": "Plant"}
    assert maps.job_to_parents == {"Analyst": JobParents(unit_name="HQ", sector_name="Finance")}


def test_duplicate_names_last_one_wins() -> None:
    maps = build_hierarchy_maps(
        "1",
        _records(
            hierarchy_row("HQ", "Finance", "Analyst"),
            hierarchy_row("Branch", "Finance", "Analyst"),
        ),
    )

    assert maps.sector_to_unit["Finance"] == "Branch"
    assert maps.job_to_parents["Analyst"].unit_name == "Branch"


def test_maps_are_read_only() -> None:
    maps = build_hierarchy_maps("1", _records(hierarchy_row("HQ", "Finance")))

    with pytest.raises(TypeError):
        maps.sector_to_unit["Other"] = "X"  # type: ignore[index]


class _Source:
    def __init__(self) -> None:
        self.calls: list[str] = []

    async def fetch_hierarchy(self, company_code: str) -> list[SocHierarchyRecord]:
        self.calls.append(company_code)
        return _records(hierarchy_row(f"HQ-{company_code}", "Finance"))


@pytest.mark.asyncio
async def test_resolver_fetches_each_company_once() -> None:
    source = _Source()
    resolver = HierarchyResolver(source)

    first = await resolver.maps_for("1")
    again = await resolver.maps_for("1")
    other = await resolver.maps_for("2")

    assert first is again
    assert other.sector_to_unit["Finance"] == "HQ-2"
    assert source.calls == ["1", "2"]
    assert resolver.fetched_companies == ("1", "2")


@pytest.mark.asyncio
async def test_resolver_propagates_fetch_errors() -> None:
    class _Broken:
        async def fetch_hierarchy(self, company_code: str):
            raise RuntimeError("SOC caido")

    with pytest.raises(RuntimeError, match="SOC caido"):
        await HierarchyResolver(_Broken()).maps_for("1")
