from __future__ import annotations

from datetime import datetime, timezone

from soc_sync.application.services.reconcilers import company_row, job_row, unit_row
from soc_sync.domain.entities.sync_statistics import (
    ReconcileOutcome,
    ReconcileResult,
    SyncEntity,
    SyncRunState,
    SyncStatistics,
)
from soc_sync.infrastructure.external.soc.types import (
    SocCompanyRecord,
    SocJobRecord,
    SocUnitRecord,
)

from soc_fakes import company, job, unit


NOW = datetime(2026, 3, 2, 12, 0, 0, tzinfo=timezone.utc)


def test_record_updates_counters_errors_and_warnings() -> None:
    stats = SyncStatistics()
    stats.record(ReconcileResult.created(SyncEntity.SECTOR, "S1", "id-1", ("nota",)))
    stats.record(ReconcileResult.failed(SyncEntity.SECTOR, "S2", "sin unidades"))
    stats.record(ReconcileResult.updated(SyncEntity.JOB, "J1", "id-2"))

    assert stats.sectors.to_dict() == {"created": 1, "updated": 0, "failed": 1}
    assert stats.jobs.total == 1
    assert [e.to_dict() for e in stats.errors] == [
        {"entity": "sector", "code": "S2", "message": "sin unidades"}
    ]
    assert [w.code for w in stats.warnings_for(SyncEntity.SECTOR)] == ["S1"]
    assert stats.errors_for(SyncEntity.JOB) == []


def test_failed_result_is_not_ok() -> None:
    result = ReconcileResult.failed(SyncEntity.UNIT, "U1", "boom")
    assert result.outcome is ReconcileOutcome.FAILED
    assert not result.ok
    assert ReconcileResult.created(SyncEntity.UNIT, "U1", "x").ok


def test_to_dict_shape() -> None:
    stats = SyncStatistics(started_at=NOW)
    stats.mark_completed()
    data = stats.to_dict()

    assert data["startedAt"] == "2026-03-02T12:00:00+00:00"
    assert data["completedAt"] is not None
    assert data["state"] == "completed"
    assert data["failure"] is None
    assert data["errors"] == []
    assert set(data) >= {"companies", "units", "sectors", "jobs", "warnings"}


def test_mark_failed_keeps_message() -> None:
    stats = SyncStatistics()
    stats.state = SyncRunState.FETCH_UNITS
    stats.mark_failed(RuntimeError("timeout"))

    assert stats.state is SyncRunState.FAILED
    assert stats.failure == "timeout"


def test_snapshot_is_independent() -> None:
    stats = SyncStatistics()
    copy = stats.snapshot()
    stats.record(ReconcileResult.failed(SyncEntity.COMPANY, "1", "x"))

    assert copy.companies.failed == 0
    assert copy.errors == []


# =============================================================================
# Mapeo registro SOC -> fila local
# =============================================================================

def test_company_row_maps_fields_and_empty_strings() -> None:
    record = SocCompanyRecord.model_validate(
        company("1", "Acme", RAZAOSOCIAL="Acme SA", CNPJ="", UF="SP")
    )
    row = company_row(record, now=NOW)

    assert row["soc_code"] == "1"
    assert row["name"] == "Acme"
    assert row["company_name"] == "Acme SA"
    assert row["cnpj"] is None
    assert row["state"] == "SP"
    assert row["active"] is True
    assert row["updated_at"] == NOW


def test_unit_row_mirrors_active_flag() -> None:
    record = SocUnitRecord.model_validate(unit("1", "U1", "HQ", active="0", GRAUDERISCOUNIDADE="3"))
    row = unit_row(record, company_id="company-id", now=NOW)

    assert row["active"] is False
    assert row["risk_degree"] == "3"
    assert row["company_id"] == "company-id"
    assert row["soc_company_code"] == "1"


def test_job_row_links_sector() -> None:
    record = SocJobRecord.model_validate(job("1", "J1", "Analyst", CBO="2522-10"))
    row = job_row(record, sector_id="sector-id", now=NOW)

    assert row["sector_id"] == "sector-id"
    assert row["cbo"] == "2522-10"
    assert row["detailed_description"] is None
