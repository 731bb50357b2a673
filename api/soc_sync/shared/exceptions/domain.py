"""
Excepciones relacionadas con la lógica de dominio de la sincronización.
"""

from soc_sync.shared.exceptions.base import AppException


class DomainException(AppException):
    """Excepción base para errores de dominio."""

    def __init__(self, message: str, error_code: str = "DOMAIN_ERROR", details=None):
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details
        )


class ParentNotFoundException(DomainException):
    """
    No se pudo resolver el padre de un registro del SOC.

    Es un fallo por registro: el reconciliador lo captura y lo contabiliza.
    """

    def __init__(self, message: str, entity: str, code: str, notes: tuple = ()):
        super().__init__(
            message=message,
            error_code="PARENT_NOT_FOUND",
            details={"entity": entity, "code": code}
        )
        # Notas de diagnostico acumuladas antes de fallar
        self.notes = tuple(notes)


class SyncAlreadyRunningException(AppException):
    """Ya hay una sincronización en curso en este proceso."""

    def __init__(self):
        super().__init__(
            message="Ya existe una sincronización SOC en curso",
            status_code=409,
            error_code="SYNC_ALREADY_RUNNING"
        )


class StatisticsNotAvailableException(DomainException):
    """Todavía no se ha ejecutado ninguna sincronización."""

    def __init__(self):
        super().__init__(
            message="No hay estadísticas: todavía no se ejecutó ninguna sincronización",
            error_code="STATISTICS_NOT_AVAILABLE"
        )
        self.status_code = 404
