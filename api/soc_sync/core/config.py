"""
Configuracion central de la aplicacion.
Gestiona variables de entorno y configuraciones globales.
Soporta configuracion dinamica para desarrollo (ENVIRONMENT=development)
y produccion (ENVIRONMENT=production).
"""
import json
from enum import Enum
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field, computed_field


class SectorNaturalKey(str, Enum):
    """
    Politica de clave natural para setores.

    - COMPOSITE: CODIGOSETOR + NOMESETOR + SETORATIVO
    - CODE: CODIGOSETOR + CODIGOEMPRESA
    """
    COMPOSITE = "composite"
    CODE = "code"


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    - ENVIRONMENT: 'development' o 'production'
    - DATABASE_URL se puede especificar completa o por componentes
    - SOC_*: conexion con el web service de exportacion de datos del SOC
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="SOC Sync Service")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Configuracion del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)

    # Base de datos - Componentes separados (recomendado para flexibilidad)
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="soc_user")
    DATABASE_PASSWORD: str = Field(default="soc_pass")
    DATABASE_NAME: str = Field(default="soc_db")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)

    # CORS (acepta lista JSON o "*" para todos los origenes)
    CORS_ORIGINS: str = Field(default="*")

    # SOC - web service "exporta dados"
    SOC_BASE_URL: str = Field(default="https://ws1.soc.com.br/WebSoc/exportadados")
    SOC_EMPRESA: str = Field(default="")
    SOC_API_KEY_COMPANIES: str = Field(default="")
    SOC_API_KEY_UNITS: str = Field(default="")
    SOC_API_KEY_SECTORS: str = Field(default="")
    SOC_API_KEY_JOBS: str = Field(default="")
    SOC_API_KEY_HIERARCHY: str = Field(default="")
    # El SOC declara JSON pero entrega el cuerpo en Latin-1
    SOC_RESPONSE_ENCODING: str = Field(default="iso-8859-1")
    SOC_TIMEOUT_S: float = Field(default=60.0)
    SOC_MAX_RETRIES: int = Field(default=2)
    SOC_UNITS_ACTIVE_ONLY: bool = Field(default=False)
    SOC_SECTOR_NATURAL_KEY: SectorNaturalKey = Field(default=SectorNaturalKey.COMPOSITE)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/app.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def is_development(self) -> bool:
        """Indica si el entorno es de desarrollo."""
        return self.ENVIRONMENT.lower() == "development"

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


def get_cors_origins(cors_string: str) -> List[str]:
    """
    Parsea la configuracion de CORS.
    Acepta "*" para todos los origenes o una lista JSON.
    """
    if cors_string == "*":
        return ["*"]
    try:
        return json.loads(cors_string)
    except json.JSONDecodeError:
        # Si no es JSON valido, retornar como lista simple
        return [origin.strip() for origin in cors_string.split(",")]


# Instancia global de configuracion
settings = Settings()
