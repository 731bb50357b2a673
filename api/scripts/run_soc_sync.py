"""
CLI: SOC -> Postgres (one-way sync).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer).
  - Misma logica que POST /api/v1/soc/sync, sin pasar por el API.

Variables de entorno requeridas:
  - SOC_EMPRESA
  - SOC_API_KEY_COMPANIES, SOC_API_KEY_UNITS, SOC_API_KEY_SECTORS,
    SOC_API_KEY_JOBS, SOC_API_KEY_HIERARCHY
  - DATABASE_URL (postgresql+asyncpg://...)

Ejecución:
  python scripts/run_soc_sync.py
  python scripts/run_soc_sync.py --entity units
  python scripts/run_soc_sync.py --init-db

Exit code: 0 si la corrida termina (aunque haya fallos por registro),
1 si se aborta.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin configurar PYTHONPATH.
# La carpeta "api" contiene el paquete raíz `soc_sync/`.
_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))

# Cargar variables desde .env antes de construir Settings:
# - api/.env (recomendado)
# - repo_root/.env
load_dotenv(_API_ROOT / ".env", override=False)
load_dotenv(_API_ROOT.parent / ".env", override=False)

from soc_sync.application.use_cases.soc_sync_use_cases import SocSyncUseCases
from soc_sync.core.events import configure_file_logging, missing_soc_settings
from soc_sync.infrastructure.database.session import AsyncSessionLocal, close_db, init_db
from soc_sync.infrastructure.external.soc.soc_client import build_soc_client

ENTITIES = ("all", "companies", "units", "sectors", "jobs")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sincroniza la jerarquia organizacional desde el SOC")
    parser.add_argument(
        "--entity",
        choices=ENTITIES,
        default="all",
        help="Entidad a sincronizar (por defecto: todas, en orden de dependencias).",
    )
    parser.add_argument(
        "--init-db",
        action="store_true",
        help="Crea las tablas si no existen antes de sincronizar.",
    )
    return parser


async def run(entity: str, init: bool) -> int:
    missing = missing_soc_settings()
    if missing:
        logger.error(f"Faltan variables de entorno obligatorias: {', '.join(missing)}")
        return 1

    if init:
        await init_db()

    try:
        async with AsyncSessionLocal() as session:
            use_cases = SocSyncUseCases(session, build_soc_client())
            runner = {
                "all": use_cases.sync_all,
                "companies": use_cases.sync_companies,
                "units": use_cases.sync_units,
                "sectors": use_cases.sync_sectors,
                "jobs": use_cases.sync_jobs,
            }[entity]
            try:
                stats = await runner()
            except Exception as e:
                logger.error(f"Sync SOC abortado: {e}")
                return 1
    finally:
        await close_db()

    print(json.dumps(stats.to_dict(), ensure_ascii=False, indent=2))
    return 0


def main() -> int:
    args = build_parser().parse_args()
    configure_file_logging()
    logger.info(f"Iniciando SOC -> Postgres sync ({args.entity})...")
    return asyncio.run(run(args.entity, args.init_db))


if __name__ == "__main__":
    raise SystemExit(main())
