"""
Cliente del web service "exporta dados" del SOC.

Particularidades del SOC:
- Un unico endpoint GET; el recurso se elige con `codigo` dentro de un objeto JSON
  que viaja url-encoded en el query param `parametro`.
- Cada recurso tiene su propia `chave` (API key).
- La respuesta declara JSON pero viene codificada en ISO-8859-1: se decodifica
  con un `decoder` intercambiable antes de parsear.
- Si el recurso tiene un solo registro, a veces llega un objeto en vez de un array.

Cualquier fallo (red, HTTP, decode, JSON, validacion) es fatal para la corrida:
una coleccion parcial no sirve.
"""

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass
from typing import Callable, Optional, TypeVar
from urllib.parse import quote

import httpx
from loguru import logger
from pydantic import ValidationError

from soc_sync.core.config import Settings, settings as default_settings
from .types import (
    SocCompanyRecord,
    SocEndpoint,
    SocHierarchyRecord,
    SocJobRecord,
    SocRecord,
    SocSectorRecord,
    SocUnitRecord,
)

R = TypeVar("R", bound=SocRecord)

Decoder = Callable[[bytes], str]

# Caracteres que encodeURIComponent no escapa
_URI_COMPONENT_SAFE = "-_.!~*'()"

# Valor de "chave" dentro del parametro ya encodeado
_CHAVE_RE = re.compile(r"(%22chave%22%3A%22).*?(%22)")


@dataclass(frozen=True)
class SocApiKeys:
    companies: str
    units: str
    sectors: str
    jobs: str
    hierarchy: str


@dataclass(frozen=True)
class SocCredentials:
    empresa: str
    api_keys: SocApiKeys


class SocApiError(RuntimeError):
    """Error de integracion con el SOC. Siempre lleva la URL solicitada."""

    def __init__(self, message: str, *, url: str) -> None:
        self.url = url
        super().__init__(f"{message} (url: {mask_chave(url)})")


def charset_decoder(encoding: str) -> Decoder:
    """Decoder que interpreta el cuerpo con el charset legado indicado."""

    def _decode(raw: bytes) -> str:
        return raw.decode(encoding)

    return _decode


def build_soc_params(
    *,
    empresa: str,
    endpoint: SocEndpoint,
    chave: str,
    ativo: Optional[str] = None,
) -> dict[str, str]:
    """
    Objeto `parametro` en el orden que espera el SOC.
    `ativo` solo se incluye cuando no es None ("" significa "todos").
    """
    params = {
        "empresa": empresa,
        "codigo": endpoint.value,
        "chave": chave,
        "tipoSaida": "json",
    }
    if ativo is not None:
        params["ativo"] = ativo
    return params


def build_soc_url(base_url: str, params: dict[str, str]) -> str:
    """
    Serializa `params` como JSON compacto y lo agrega como `?parametro=`.
    El encoding replica encodeURIComponent.
    """
    raw = json.dumps(params, separators=(",", ":"), ensure_ascii=False)
    return f"{base_url}?parametro={quote(raw, safe=_URI_COMPONENT_SAFE)}"


def mask_chave(url: str) -> str:
    """Oculta la API key de una URL del SOC (para logs y mensajes)."""
    return _CHAVE_RE.sub(r"\1***\2", url)


def parse_soc_payload(text: str, model: type[R]) -> list[R]:
    """
    Parsea el cuerpo ya decodificado y valida cada elemento.
    Un objeto suelto se normaliza a lista de un elemento.
    """
    payload = json.loads(text)
    if isinstance(payload, dict):
        payload = [payload]
    if not isinstance(payload, list):
        raise ValueError(f"Respuesta inesperada del SOC: {type(payload).__name__}")
    return [model.model_validate(item) for item in payload]


class SocApiClient:
    """
    Cliente HTTP del SOC. Cada fetch_* retorna la coleccion completa tipada.

    Importante:
    - No interpreta los datos (flags, relaciones): eso es del reconciliador.
    - El `decoder` por defecto usa SOC_RESPONSE_ENCODING; los tests pueden
      inyectar otro.
    """

    def __init__(
        self,
        credentials: SocCredentials,
        *,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        decoder: Optional[Decoder] = None,
        timeout_s: float = 60.0,
        max_retries: int = 2,
        min_backoff_s: float = 0.8,
        max_backoff_s: float = 20.0,
    ) -> None:
        self._creds = credentials
        self._base_url = base_url.rstrip("/")
        self._http = http_client
        self._decoder = decoder or charset_decoder("iso-8859-1")
        self._timeout_s = timeout_s
        self._max_retries = max_retries
        self._min_backoff_s = min_backoff_s
        self._max_backoff_s = max_backoff_s

    async def fetch_companies(self) -> list[SocCompanyRecord]:
        return await self._fetch(
            SocEndpoint.COMPANIES, self._creds.api_keys.companies, SocCompanyRecord
        )

    async def fetch_units(self, active_only: bool = False) -> list[SocUnitRecord]:
        return await self._fetch(
            SocEndpoint.UNITS,
            self._creds.api_keys.units,
            SocUnitRecord,
            ativo="1" if active_only else "",
        )

    async def fetch_sectors(self) -> list[SocSectorRecord]:
        return await self._fetch(
            SocEndpoint.SECTORS, self._creds.api_keys.sectors, SocSectorRecord
        )

    async def fetch_jobs(self) -> list[SocJobRecord]:
        return await self._fetch(SocEndpoint.JOBS, self._creds.api_keys.jobs, SocJobRecord)

    async def fetch_hierarchy(self, company_code: str) -> list[SocHierarchyRecord]:
        """
        Jerarquia (unidade -> setor -> cargo) de una empresa concreta.
        A diferencia del resto, `empresa` es la empresa pedida, no la configurada.
        """
        return await self._fetch(
            SocEndpoint.HIERARCHY,
            self._creds.api_keys.hierarchy,
            SocHierarchyRecord,
            empresa=company_code,
        )

    async def _fetch(
        self,
        endpoint: SocEndpoint,
        chave: str,
        model: type[R],
        *,
        empresa: Optional[str] = None,
        ativo: Optional[str] = None,
    ) -> list[R]:
        params = build_soc_params(
            empresa=empresa if empresa is not None else self._creds.empresa,
            endpoint=endpoint,
            chave=chave,
            ativo=ativo,
        )
        url = build_soc_url(self._base_url, params)
        logger.debug(f"SOC request [{endpoint.name}]: {mask_chave(url)}")

        raw = await self._request_bytes(url)
        try:
            records = parse_soc_payload(self._decoder(raw), model)
        except (UnicodeDecodeError, ValueError, ValidationError) as e:
            # json.JSONDecodeError es subclase de ValueError
            raise SocApiError(
                f"No se pudo interpretar la respuesta del SOC ({endpoint.name}): {e}", url=url
            ) from e

        logger.debug(f"SOC [{endpoint.name}] devolvio {len(records)} registro(s)")
        return records

    async def _request_bytes(self, url: str) -> bytes:
        """
        GET con backoff para 429/5xx.

        Estrategia:
        - 429: respeta Retry-After si existe, si no exponencial con jitter simple.
        - 5xx: exponencial con jitter.
        - 4xx (no 429): error inmediato (config/chave mal).
        """
        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._get(url)
            except httpx.HTTPError as e:
                raise SocApiError(f"Fallo de red consultando el SOC: {e}", url=url) from e

            if 200 <= resp.status_code < 300:
                return resp.content

            # Errores recuperables
            if resp.status_code == 429 or 500 <= resp.status_code < 600:
                if attempt >= self._max_retries:
                    raise SocApiError(
                        f"SOC error {resp.status_code} tras {attempt} reintentos", url=url
                    )

                retry_after = resp.headers.get("Retry-After")
                if retry_after:
                    try:
                        sleep_s = float(retry_after)
                    except ValueError:
                        sleep_s = self._min_backoff_s
                else:
                    base = min(self._max_backoff_s, self._min_backoff_s * (2**attempt))
                    sleep_s = base + (0.15 * base)

                logger.warning(f"SOC respondio {resp.status_code}; reintento en {sleep_s:.1f}s")
                await asyncio.sleep(sleep_s)
                continue

            # Errores no recuperables
            raise SocApiError(f"SOC request fallo {resp.status_code}", url=url)

        # El bucle siempre retorna o lanza
        raise SocApiError("SOC request sin respuesta", url=url)

    async def _get(self, url: str) -> httpx.Response:
        if self._http is not None:
            return await self._http.get(url, timeout=self._timeout_s)
        async with httpx.AsyncClient(timeout=self._timeout_s) as client:
            return await client.get(url)


def build_soc_client(
    config: Optional[Settings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> SocApiClient:
    """
    Constructor "oficial" del cliente leyendo la configuracion (SOC_*).
    """
    cfg = config or default_settings
    credentials = SocCredentials(
        empresa=cfg.SOC_EMPRESA,
        api_keys=SocApiKeys(
            companies=cfg.SOC_API_KEY_COMPANIES,
            units=cfg.SOC_API_KEY_UNITS,
            sectors=cfg.SOC_API_KEY_SECTORS,
            jobs=cfg.SOC_API_KEY_JOBS,
            hierarchy=cfg.SOC_API_KEY_HIERARCHY,
        ),
    )
    return SocApiClient(
        credentials,
        base_url=cfg.SOC_BASE_URL,
        http_client=http_client,
        decoder=charset_decoder(cfg.SOC_RESPONSE_ENCODING),
        timeout_s=cfg.SOC_TIMEOUT_S,
        max_retries=cfg.SOC_MAX_RETRIES,
    )
