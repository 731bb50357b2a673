"""
Entidades del dominio.
"""
from soc_sync.domain.entities.sync_statistics import (
    SyncEntity,
    ReconcileOutcome,
    SyncRunState,
    SyncIssue,
    ReconcileResult,
    EntityCounters,
    SyncStatistics,
)

__all__ = [
    "SyncEntity",
    "ReconcileOutcome",
    "SyncRunState",
    "SyncIssue",
    "ReconcileResult",
    "EntityCounters",
    "SyncStatistics",
]
