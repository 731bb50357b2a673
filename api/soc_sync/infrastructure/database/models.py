"""
Modelos de base de datos (ORM).

Espejo local de la jerarquia organizacional del SOC:
empresa -> unidade -> setor -> cargo.
"""
from sqlalchemy import Column, String, DateTime, Text, Boolean, ForeignKey, UniqueConstraint, Index
from sqlalchemy.sql import func

from soc_sync.infrastructure.database.session import Base


class SocCompanyModel(Base):
    """Empresa sincronizada desde el SOC (endpoint de empresas)."""

    __tablename__ = "soc_companies"

    id = Column(String(36), primary_key=True)
    soc_code = Column(String(50), nullable=False, unique=True, index=True)  # CODIGO
    name = Column(String(255), nullable=False)  # NOMEABREVIADO
    company_name = Column(String(255), nullable=True)  # RAZAOSOCIAL
    cnpj = Column(String(18), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(120), nullable=True)
    state = Column(String(2), nullable=True)
    zip_code = Column(String(10), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<SocCompany(id={self.id}, soc_code={self.soc_code}, name={self.name})>"


class SocUnitModel(Base):
    """Unidade de una empresa."""

    __tablename__ = "soc_units"
    __table_args__ = (
        UniqueConstraint("soc_code", "soc_company_code", name="uq_soc_units_code_company"),
        Index("ix_soc_units_company_name", "soc_company_code", "name"),
    )

    id = Column(String(36), primary_key=True)
    soc_code = Column(String(50), nullable=False)  # CODIGOUNIDADE
    soc_company_code = Column(String(50), nullable=False, index=True)  # CODIGOEMPRESA
    name = Column(String(255), nullable=False)  # NOMEUNIDADE
    company_name = Column(String(255), nullable=True)  # RAZAOSOCIAL
    cnpj = Column(String(18), nullable=True)
    cpf = Column(String(14), nullable=True)
    address = Column(Text, nullable=True)
    risk_degree = Column(String(1), nullable=True)  # GRAUDERISCOUNIDADE
    company_id = Column(String(36), ForeignKey("soc_companies.id", ondelete="CASCADE"), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<SocUnit(id={self.id}, soc_code={self.soc_code}, name={self.name})>"


class SocSectorModel(Base):
    """Setor, colgado de una unidade."""

    __tablename__ = "soc_sectors"
    __table_args__ = (
        Index("ix_soc_sectors_code_name_active", "soc_code", "name", "active"),
        Index("ix_soc_sectors_company_name", "soc_company_code", "name"),
    )

    id = Column(String(36), primary_key=True)
    soc_code = Column(String(50), nullable=False)  # CODIGOSETOR
    soc_company_code = Column(String(50), nullable=False, index=True)
    name = Column(String(255), nullable=False)  # NOMESETOR
    unit_id = Column(String(36), ForeignKey("soc_units.id", ondelete="CASCADE"), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<SocSector(id={self.id}, soc_code={self.soc_code}, name={self.name})>"


class SocJobModel(Base):
    """Cargo, colgado de un setor."""

    __tablename__ = "soc_jobs"

    id = Column(String(36), primary_key=True)
    soc_code = Column(String(50), nullable=False, unique=True, index=True)  # CODIGOCARGO
    soc_company_code = Column(String(50), nullable=False, index=True)
    name = Column(String(255), nullable=False)  # NOMECARGO
    detailed_description = Column(Text, nullable=True)  # DESCRICAODETALHADA
    cbo = Column(String(20), nullable=True)
    sector_id = Column(String(36), ForeignKey("soc_sectors.id", ondelete="CASCADE"), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<SocJob(id={self.id}, soc_code={self.soc_code}, name={self.name})>"
