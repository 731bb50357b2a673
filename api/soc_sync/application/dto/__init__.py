"""
Data Transfer Objects (DTOs) para la capa de aplicacion.
"""
from .soc_sync_dto import (
    SyncIssueDTO,
    EntityCountersDTO,
    SyncStatisticsDTO,
    EntitySyncStatisticsDTO,
    SyncResponseDTO,
    EntitySyncResponseDTO,
)

__all__ = [
    "SyncIssueDTO",
    "EntityCountersDTO",
    "SyncStatisticsDTO",
    "EntitySyncStatisticsDTO",
    "SyncResponseDTO",
    "EntitySyncResponseDTO",
]
