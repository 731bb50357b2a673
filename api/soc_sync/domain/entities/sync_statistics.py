"""
Entidades de resultado de la sincronización SOC.

- ReconcileResult: resultado explícito de reconciliar UN registro.
- SyncStatistics: acumulador de una corrida (contadores por entidad,
  log estructurado de errores y avisos, estado de la corrida).

Sin I/O: la orquestación crea un acumulador nuevo por corrida y lo
pasa de etapa en etapa.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from soc_sync.shared.utils.datetime_utils import DateTimeUtils


class SyncEntity(str, Enum):
    COMPANY = "company"
    UNIT = "unit"
    SECTOR = "sector"
    JOB = "job"


class ReconcileOutcome(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    FAILED = "failed"


class SyncRunState(str, Enum):
    """Estados de una corrida. FAILED solo por un fallo a nivel de orquestación."""

    INITIALIZED = "initialized"
    FETCH_COMPANIES = "fetch_companies"
    RECONCILE_COMPANIES = "reconcile_companies"
    FETCH_UNITS = "fetch_units"
    RECONCILE_UNITS = "reconcile_units"
    FETCH_SECTORS = "fetch_sectors"
    HIERARCHY_LOOKUP_SECTORS = "hierarchy_lookup_sectors"
    RECONCILE_SECTORS = "reconcile_sectors"
    FETCH_JOBS = "fetch_jobs"
    HIERARCHY_LOOKUP_JOBS = "hierarchy_lookup_jobs"
    RECONCILE_JOBS = "reconcile_jobs"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class SyncIssue:
    """Entrada del log estructurado: {entity, code, message}."""

    entity: SyncEntity
    code: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"entity": self.entity.value, "code": self.code, "message": self.message}


@dataclass(frozen=True)
class ReconcileResult:
    entity: SyncEntity
    code: str
    outcome: ReconcileOutcome
    record_id: Optional[str] = None
    message: Optional[str] = None
    notes: tuple[str, ...] = ()

    @classmethod
    def created(cls, entity: SyncEntity, code: str, record_id: str, notes: tuple[str, ...] = ()) -> "ReconcileResult":
        return cls(entity, code, ReconcileOutcome.CREATED, record_id=record_id, notes=notes)

    @classmethod
    def updated(cls, entity: SyncEntity, code: str, record_id: str, notes: tuple[str, ...] = ()) -> "ReconcileResult":
        return cls(entity, code, ReconcileOutcome.UPDATED, record_id=record_id, notes=notes)

    @classmethod
    def failed(cls, entity: SyncEntity, code: str, message: str, notes: tuple[str, ...] = ()) -> "ReconcileResult":
        return cls(entity, code, ReconcileOutcome.FAILED, message=message, notes=notes)

    @property
    def ok(self) -> bool:
        return self.outcome is not ReconcileOutcome.FAILED


@dataclass
class EntityCounters:
    created: int = 0
    updated: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.created + self.updated + self.failed

    def to_dict(self) -> dict[str, int]:
        return {"created": self.created, "updated": self.updated, "failed": self.failed}


@dataclass
class SyncStatistics:
    companies: EntityCounters = field(default_factory=EntityCounters)
    units: EntityCounters = field(default_factory=EntityCounters)
    sectors: EntityCounters = field(default_factory=EntityCounters)
    jobs: EntityCounters = field(default_factory=EntityCounters)
    errors: list[SyncIssue] = field(default_factory=list)
    warnings: list[SyncIssue] = field(default_factory=list)
    started_at: datetime = field(default_factory=DateTimeUtils.now_utc)
    completed_at: Optional[datetime] = None
    state: SyncRunState = SyncRunState.INITIALIZED
    failure: Optional[str] = None

    def counters_for(self, entity: SyncEntity) -> EntityCounters:
        return {
            SyncEntity.COMPANY: self.companies,
            SyncEntity.UNIT: self.units,
            SyncEntity.SECTOR: self.sectors,
            SyncEntity.JOB: self.jobs,
        }[entity]

    def record(self, result: ReconcileResult) -> None:
        """Incorpora el resultado de un registro al acumulador."""
        counters = self.counters_for(result.entity)
        if result.outcome is ReconcileOutcome.CREATED:
            counters.created += 1
        elif result.outcome is ReconcileOutcome.UPDATED:
            counters.updated += 1
        else:
            counters.failed += 1
            self.errors.append(
                SyncIssue(result.entity, result.code, result.message or "Error desconocido")
            )
        for note in result.notes:
            self.warnings.append(SyncIssue(result.entity, result.code, note))

    def errors_for(self, entity: SyncEntity) -> list[SyncIssue]:
        return [e for e in self.errors if e.entity is entity]

    def warnings_for(self, entity: SyncEntity) -> list[SyncIssue]:
        return [w for w in self.warnings if w.entity is entity]

    def mark_completed(self) -> None:
        self.state = SyncRunState.COMPLETED
        self.completed_at = DateTimeUtils.now_utc()

    def mark_failed(self, error: BaseException) -> None:
        self.state = SyncRunState.FAILED
        self.failure = str(error)
        self.completed_at = DateTimeUtils.now_utc()

    def snapshot(self) -> "SyncStatistics":
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "companies": self.companies.to_dict(),
            "units": self.units.to_dict(),
            "sectors": self.sectors.to_dict(),
            "jobs": self.jobs.to_dict(),
            "startedAt": DateTimeUtils.to_iso_string(self.started_at),
            "completedAt": DateTimeUtils.to_iso_string(self.completed_at),
            "state": self.state.value,
            "failure": self.failure,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
        }
