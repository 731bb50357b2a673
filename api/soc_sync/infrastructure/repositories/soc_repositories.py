"""
Repositorios de la jerarquia SOC (empresa, unidade, setor, cargo).

Cada repositorio encapsula las busquedas por clave natural, las busquedas de
padres y las escrituras de su tabla. No hacen commit: el reconciliador decide
la frontera transaccional (un registro = una transaccion).
"""
import uuid
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from soc_sync.core.config import SectorNaturalKey
from soc_sync.infrastructure.database.models import (
    SocCompanyModel,
    SocJobModel,
    SocSectorModel,
    SocUnitModel,
)

M = TypeVar("M")


class _SocRepository(Generic[M]):
    """Escrituras comunes: insert con id nuevo y overwrite completo."""

    model: Type[M]

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, data: Dict[str, Any]) -> M:
        """Inserta una fila nueva con un id generado localmente."""
        instance = self.model(id=str(uuid.uuid4()), **data)
        self.db.add(instance)
        await self.db.flush()
        return instance

    async def update(self, instance: M, data: Dict[str, Any]) -> M:
        """Sobrescribe todos los campos recibidos; id y created_at se conservan."""
        for key, value in data.items():
            setattr(instance, key, value)
        await self.db.flush()
        return instance

    async def _first(self, *conditions, order_by=None) -> Optional[M]:
        query = select(self.model).where(and_(*conditions))
        if order_by is not None:
            query = query.order_by(*order_by)
        result = await self.db.execute(query.limit(1))
        return result.scalars().first()


class SocCompanyRepository(_SocRepository[SocCompanyModel]):
    model = SocCompanyModel

    async def get_by_soc_code(self, soc_code: str) -> Optional[SocCompanyModel]:
        return await self._first(SocCompanyModel.soc_code == soc_code)


class SocUnitRepository(_SocRepository[SocUnitModel]):
    model = SocUnitModel

    async def get_by_natural_key(self, soc_code: str, soc_company_code: str) -> Optional[SocUnitModel]:
        """Clave natural de unidade: CODIGOUNIDADE acotado por CODIGOEMPRESA."""
        return await self._first(
            SocUnitModel.soc_code == soc_code,
            SocUnitModel.soc_company_code == soc_company_code,
        )

    async def find_active_by_name(self, name: str, soc_company_code: str) -> Optional[SocUnitModel]:
        return await self._first(
            SocUnitModel.name == name,
            SocUnitModel.soc_company_code == soc_company_code,
            SocUnitModel.active.is_(True),
            order_by=(SocUnitModel.created_at, SocUnitModel.id),
        )

    async def find_by_name(self, name: str, soc_company_code: str) -> Optional[SocUnitModel]:
        """Unidade por nombre sin filtrar el flag; si hay homonimas gana la activa."""
        return await self._first(
            SocUnitModel.name == name,
            SocUnitModel.soc_company_code == soc_company_code,
            order_by=(SocUnitModel.active.desc(), SocUnitModel.created_at, SocUnitModel.id),
        )

    async def first_active_for_company(self, soc_company_code: str) -> Optional[SocUnitModel]:
        return await self._first(
            SocUnitModel.soc_company_code == soc_company_code,
            SocUnitModel.active.is_(True),
            order_by=(SocUnitModel.created_at, SocUnitModel.id),
        )


class SocSectorRepository(_SocRepository[SocSectorModel]):
    model = SocSectorModel

    def __init__(self, db: AsyncSession, natural_key: SectorNaturalKey = SectorNaturalKey.COMPOSITE):
        super().__init__(db)
        self.natural_key = natural_key

    async def get_by_natural_key(
        self,
        *,
        soc_code: str,
        soc_company_code: str,
        name: str,
        active: bool,
    ) -> Optional[SocSectorModel]:
        """
        Busca el setor segun la politica configurada:
        - COMPOSITE: CODIGOSETOR + NOMESETOR + SETORATIVO
        - CODE: CODIGOSETOR + CODIGOEMPRESA
        """
        if self.natural_key is SectorNaturalKey.CODE:
            return await self._first(
                SocSectorModel.soc_code == soc_code,
                SocSectorModel.soc_company_code == soc_company_code,
            )
        return await self._first(
            SocSectorModel.soc_code == soc_code,
            SocSectorModel.name == name,
            SocSectorModel.active.is_(active),
        )

    async def find_by_name_in_unit(
        self, name: str, unit_id: str, soc_company_code: str
    ) -> Optional[SocSectorModel]:
        return await self._first(
            SocSectorModel.name == name,
            SocSectorModel.unit_id == unit_id,
            SocSectorModel.soc_company_code == soc_company_code,
            order_by=(SocSectorModel.created_at, SocSectorModel.id),
        )

    async def first_for_company(self, soc_company_code: str) -> Optional[SocSectorModel]:
        return await self._first(
            SocSectorModel.soc_company_code == soc_company_code,
            order_by=(SocSectorModel.created_at, SocSectorModel.id),
        )


class SocJobRepository(_SocRepository[SocJobModel]):
    model = SocJobModel

    async def get_by_soc_code(self, soc_code: str) -> Optional[SocJobModel]:
        return await self._first(SocJobModel.soc_code == soc_code)
