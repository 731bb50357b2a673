"""
Manejadores de eventos de inicio y cierre de la aplicacion.
"""
from typing import Callable, List
from fastapi import FastAPI
from loguru import logger

from soc_sync.core.config import settings
from soc_sync.infrastructure.database.session import init_db, close_db


def startup_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de inicio de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de inicio
    """
    async def startup() -> None:
        """Inicializa recursos al inicio de la aplicacion."""
        try:
            logger.info(f"Iniciando {settings.APP_NAME} v{settings.APP_VERSION}")
            logger.info(f"Entorno: {settings.ENVIRONMENT}")

            # Validar configuracion critica
            _validate_config()

            # Inicializar base de datos (crea tablas si no existen)
            await init_db()
            logger.info("Base de datos inicializada")

            configure_file_logging()

            logger.success("Aplicacion iniciada correctamente")

        except Exception as e:
            logger.error(f"Error durante startup: {e}")
            logger.exception("Detalle del error:")
            raise

    return startup


def configure_file_logging() -> None:
    """Agrega el sink de archivo con rotacion."""
    logger.add(
        settings.LOG_FILE,
        rotation="500 MB",
        retention="10 days",
        level=settings.LOG_LEVEL
    )


def missing_soc_settings() -> List[str]:
    """Nombres de las variables SOC_* obligatorias que estan vacias."""
    required = [
        "SOC_BASE_URL",
        "SOC_EMPRESA",
        "SOC_API_KEY_COMPANIES",
        "SOC_API_KEY_UNITS",
        "SOC_API_KEY_SECTORS",
        "SOC_API_KEY_JOBS",
        "SOC_API_KEY_HIERARCHY",
    ]
    return [name for name in required if not getattr(settings, name)]


def _validate_config() -> None:
    """Valida que la configuracion critica este presente."""
    for name in missing_soc_settings():
        logger.warning(f"CONFIG: {name} no configurada - la sincronizacion SOC fallara")


def shutdown_handler(app: FastAPI) -> Callable:
    """
    Manejador de eventos de cierre de la aplicacion.

    Args:
        app: Instancia de FastAPI

    Returns:
        Callable: Funcion asincrona de cierre
    """
    async def shutdown() -> None:
        """Libera recursos al cerrar la aplicacion."""
        logger.info("Cerrando aplicacion...")

        # Cerrar conexiones de base de datos
        await close_db()
        logger.info("Conexiones de base de datos cerradas")

        logger.success("Aplicacion cerrada correctamente")

    return shutdown
