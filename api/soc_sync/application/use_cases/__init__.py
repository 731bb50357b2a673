"""
Casos de uso de la aplicacion.
"""
from .soc_sync_use_cases import SocSyncUseCases

__all__ = ["SocSyncUseCases"]
