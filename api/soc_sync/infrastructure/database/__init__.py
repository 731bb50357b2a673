"""
Configuración de base de datos.

Importa todos los modelos para que se registren con Base
antes de crear las tablas.
"""
from soc_sync.infrastructure.database.models import (
    SocCompanyModel,
    SocUnitModel,
    SocSectorModel,
    SocJobModel,
)
