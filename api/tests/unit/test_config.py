"""
Tests de configuración (Settings) y validación de arranque.
"""
from __future__ import annotations

from unittest.mock import patch

from soc_sync.core.config import SectorNaturalKey, Settings, get_cors_origins
from soc_sync.core import events


def test_database_url_override() -> None:
    cfg = Settings(DATABASE_URL="sqlite+aiosqlite:///:memory:")
    assert cfg.effective_database_url == "sqlite+aiosqlite:///:memory:"


def test_database_url_from_components() -> None:
    cfg = Settings(
        DATABASE_URL="",
        DATABASE_HOST="db",
        DATABASE_PORT=5433,
        DATABASE_USER="u",
        DATABASE_PASSWORD="p",
        DATABASE_NAME="soc",
    )
    assert cfg.effective_database_url == "postgresql+asyncpg://u:p@db:5433/soc"


def test_soc_defaults() -> None:
    cfg = Settings()
    assert cfg.SOC_RESPONSE_ENCODING == "iso-8859-1"
    assert cfg.SOC_SECTOR_NATURAL_KEY is SectorNaturalKey.COMPOSITE
    assert cfg.SOC_UNITS_ACTIVE_ONLY is False


def test_sector_key_from_string() -> None:
    cfg = Settings(SOC_SECTOR_NATURAL_KEY="code")
    assert cfg.SOC_SECTOR_NATURAL_KEY is SectorNaturalKey.CODE


def test_cors_origins_parsing() -> None:
    assert get_cors_origins("*") == ["*"]
    assert get_cors_origins('["http://a", "http://b"]') == ["http://a", "http://b"]
    assert get_cors_origins("http://a, http://b") == ["http://a", "http://b"]


def test_missing_soc_settings_lists_empty_values() -> None:
    cfg = Settings(
        SOC_EMPRESA="1",
        SOC_API_KEY_COMPANIES="a",
        SOC_API_KEY_UNITS="b",
        SOC_API_KEY_SECTORS="",
        SOC_API_KEY_JOBS="d",
        SOC_API_KEY_HIERARCHY="",
    )
    with patch.object(events, "settings", cfg):
        assert events.missing_soc_settings() == ["SOC_API_KEY_SECTORS", "SOC_API_KEY_HIERARCHY"]


def test_engine_kwargs_pool_only_for_postgres() -> None:
    from soc_sync.core.config import settings
    from soc_sync.infrastructure.database.session import engine_kwargs

    pg = engine_kwargs("postgresql+asyncpg://u:p@db:5432/soc")
    lite = engine_kwargs("sqlite+aiosqlite:///:memory:", echo=True)

    assert pg["pool_pre_ping"] is True
    assert pg["pool_size"] == settings.DB_POOL_SIZE
    assert "pool_size" not in lite
    assert lite["echo"] is True
