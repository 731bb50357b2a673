"""
Tipos del web service de exportacion de datos del SOC.

Los registros llegan planos y con nombres de campo en mayusculas (portugues);
aqui se modelan con pydantic usando alias para conservar el nombre original
y exponer atributos snake_case. Modulo sin I/O.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SocEndpoint(str, Enum):
    """Identificadores (`codigo`) de los endpoints de exportacion del SOC."""

    COMPANIES = "200267"
    UNITS = "200266"
    SECTORS = "200268"
    JOBS = "200265"
    HIERARCHY = "198531"


ACTIVE_FLAG = "1"


class SocRecord(BaseModel):
    """
    Base de los registros del SOC.

    - null -> "" (el SOC mezcla ambos para "sin valor")
    - numeros -> str (algunos codigos llegan como enteros)
    - campos desconocidos se ignoran
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @field_validator("*", mode="before")
    @classmethod
    def _normalize_scalar(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, bool):
            return ACTIVE_FLAG if value else "0"
        if isinstance(value, (int, float)):
            return str(value)
        return value


class SocCompanyRecord(SocRecord):
    code: str = Field(alias="CODIGO")
    short_name: str = Field(default="", alias="NOMEABREVIADO")
    legal_name: str = Field(default="", alias="RAZAOSOCIAL")
    initial_legal_name: str = Field(default="", alias="RAZAOSOCIALINICIAL")
    address: str = Field(default="", alias="ENDERECO")
    address_number: str = Field(default="", alias="NUMEROENDERECO")
    address_complement: str = Field(default="", alias="COMPLEMENTOENDERECO")
    district: str = Field(default="", alias="BAIRRO")
    city: str = Field(default="", alias="CIDADE")
    zip_code: str = Field(default="", alias="CEP")
    state: str = Field(default="", alias="UF")
    cnpj: str = Field(default="", alias="CNPJ")
    active_flag: str = Field(default="", alias="ATIVO")

    @property
    def active(self) -> bool:
        return self.active_flag == ACTIVE_FLAG


class SocUnitRecord(SocRecord):
    company_code: str = Field(alias="CODIGOEMPRESA")
    company_short_name: str = Field(default="", alias="NOMEEMPRESA")
    code: str = Field(alias="CODIGOUNIDADE")
    name: str = Field(default="", alias="NOMEUNIDADE")
    hr_code: str = Field(default="", alias="CODIGORHUNIDADE")
    risk_degree: str = Field(default="", alias="GRAUDERISCOUNIDADE")
    active_flag: str = Field(default="", alias="UNIDADEATIVA")
    cnpj: str = Field(default="", alias="CNPJUNIDADE")
    cpf: str = Field(default="", alias="CPFUNIDADE")
    address: str = Field(default="", alias="ENDERECO")
    city: str = Field(default="", alias="CIDADE")
    state: str = Field(default="", alias="UF")
    zip_code: str = Field(default="", alias="CEP")
    legal_name: str = Field(default="", alias="RAZAOSOCIAL")

    @property
    def active(self) -> bool:
        return self.active_flag == ACTIVE_FLAG


class SocSectorRecord(SocRecord):
    company_code: str = Field(alias="CODIGOEMPRESA")
    company_short_name: str = Field(default="", alias="NOMEEMPRESA")
    code: str = Field(alias="CODIGOSETOR")
    name: str = Field(default="", alias="NOMESETOR")
    hr_code: str = Field(default="", alias="CODIGORHSETOR")
    active_flag: str = Field(default="", alias="SETORATIVO")

    @property
    def active(self) -> bool:
        return self.active_flag == ACTIVE_FLAG


class SocJobRecord(SocRecord):
    company_code: str = Field(alias="CODIGOEMPRESA")
    company_short_name: str = Field(default="", alias="NOMEEMPRESA")
    code: str = Field(alias="CODIGOCARGO")
    name: str = Field(default="", alias="NOMECARGO")
    hr_code: str = Field(default="", alias="CODIGORHCARGO")
    active_flag: str = Field(default="", alias="CARGOATIVO")
    function: str = Field(default="", alias="FUNCAO")
    detailed_description: str = Field(default="", alias="DESCRICAODETALHADA")
    cbo: str = Field(default="", alias="CBO")

    @property
    def active(self) -> bool:
        return self.active_flag == ACTIVE_FLAG


class SocHierarchyRecord(SocRecord):
    """Relacion unidade -> setor -> cargo por nombre. Nunca se persiste."""

    unit_name: str = Field(default="", alias="NOMEUNIDADE")
    sector_name: str = Field(default="", alias="NOMESETOR")
    job_name: str = Field(default="", alias="NOMECARGO")
