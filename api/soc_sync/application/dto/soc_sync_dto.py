"""
DTOs de la sincronización SOC.
Definen la forma de las respuestas de los endpoints de sincronización.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from soc_sync.domain.entities.sync_statistics import (
    EntityCounters,
    SyncEntity,
    SyncIssue,
    SyncStatistics,
)


class SyncIssueDTO(BaseModel):
    """Entrada del log de errores/avisos."""
    entity: str = Field(..., description="company | unit | sector | job")
    code: str = Field(..., description="Código SOC del registro")
    message: str

    @classmethod
    def from_issue(cls, issue: SyncIssue) -> "SyncIssueDTO":
        return cls(entity=issue.entity.value, code=issue.code, message=issue.message)


class EntityCountersDTO(BaseModel):
    created: int = 0
    updated: int = 0
    failed: int = 0

    @classmethod
    def from_counters(cls, counters: EntityCounters) -> "EntityCountersDTO":
        return cls(created=counters.created, updated=counters.updated, failed=counters.failed)


class SyncStatisticsDTO(BaseModel):
    """Estadísticas completas de una corrida."""
    model_config = ConfigDict(populate_by_name=True)

    companies: EntityCountersDTO
    units: EntityCountersDTO
    sectors: EntityCountersDTO
    jobs: EntityCountersDTO
    started_at: datetime = Field(..., alias="startedAt")
    completed_at: Optional[datetime] = Field(None, alias="completedAt")
    state: str
    failure: Optional[str] = None
    errors: List[SyncIssueDTO] = Field(default_factory=list)
    warnings: List[SyncIssueDTO] = Field(default_factory=list)

    @classmethod
    def from_statistics(cls, stats: SyncStatistics) -> "SyncStatisticsDTO":
        return cls(
            companies=EntityCountersDTO.from_counters(stats.companies),
            units=EntityCountersDTO.from_counters(stats.units),
            sectors=EntityCountersDTO.from_counters(stats.sectors),
            jobs=EntityCountersDTO.from_counters(stats.jobs),
            started_at=stats.started_at,
            completed_at=stats.completed_at,
            state=stats.state.value,
            failure=stats.failure,
            errors=[SyncIssueDTO.from_issue(e) for e in stats.errors],
            warnings=[SyncIssueDTO.from_issue(w) for w in stats.warnings],
        )


class EntitySyncStatisticsDTO(EntityCountersDTO):
    """Estadísticas de una sola entidad (sync parcial)."""
    errors: List[SyncIssueDTO] = Field(default_factory=list)
    warnings: List[SyncIssueDTO] = Field(default_factory=list)

    @classmethod
    def from_statistics(cls, stats: SyncStatistics, entity: SyncEntity) -> "EntitySyncStatisticsDTO":
        counters = stats.counters_for(entity)
        return cls(
            created=counters.created,
            updated=counters.updated,
            failed=counters.failed,
            errors=[SyncIssueDTO.from_issue(e) for e in stats.errors_for(entity)],
            warnings=[SyncIssueDTO.from_issue(w) for w in stats.warnings_for(entity)],
        )


class SyncResponseDTO(BaseModel):
    """Respuesta de la sincronización completa."""
    success: bool
    message: str
    statistics: SyncStatisticsDTO


class EntitySyncResponseDTO(BaseModel):
    """Respuesta de una sincronización por entidad."""
    success: bool
    message: str
    statistics: EntitySyncStatisticsDTO
