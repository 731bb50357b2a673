"""
Punto de entrada principal de la aplicación FastAPI.
Configura la aplicación, middlewares, rutas y eventos.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from soc_sync.core.config import settings, get_cors_origins
from soc_sync.core.events import startup_handler, shutdown_handler
from soc_sync.api.v1.router import api_router
from soc_sync.api.middlewares.error_handler import ErrorHandlerMiddleware
from soc_sync.shared.exceptions.base import AppException


@asynccontextmanager
async def lifespan(application: FastAPI):
    """Eventos de inicio y cierre."""
    await startup_handler(application)()
    yield
    await shutdown_handler(application)()


def create_application() -> FastAPI:
    """
    Factory para crear y configurar la aplicación FastAPI.

    Returns:
        FastAPI: Instancia configurada de la aplicación
    """
    application = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Sincronización de empresas, unidades, setores y cargos desde el SOC",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Configurar CORS
    cors_origins = get_cors_origins(settings.CORS_ORIGINS)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Middleware personalizado para manejo de errores
    application.add_middleware(ErrorHandlerMiddleware)

    # Incluir routers de la API
    application.include_router(api_router, prefix="/api")

    # Manejador global de excepciones personalizadas
    @application.exception_handler(AppException)
    async def app_exception_handler(request, exc: AppException):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    # Health check endpoint
    @application.get("/health", tags=["Health"])
    async def health_check():
        """Endpoint para verificar el estado de la aplicación."""
        return {
            "status": "healthy",
            "app_name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "environment": settings.ENVIRONMENT
        }

    return application


# Crear instancia de la aplicación
app = create_application()


if __name__ == "__main__":
    import uvicorn
    from loguru import logger

    # Determinar la URL base de acceso
    if settings.HOST == "0.0.0.0":
        access_host = "localhost"
    else:
        access_host = settings.HOST

    base_url = f"http://{access_host}:{settings.PORT}"

    logger.info("=" * 70)
    logger.info("URLS DISPONIBLES:")
    logger.info("=" * 70)
    logger.info(f"  Swagger UI:  {base_url}/docs")
    logger.info(f"  Sync SOC:    {base_url}/api/v1/soc/sync")
    logger.info(f"  Health:      {base_url}/health")
    logger.info("=" * 70)

    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG or settings.is_development,
        log_level=settings.LOG_LEVEL.lower()
    )
