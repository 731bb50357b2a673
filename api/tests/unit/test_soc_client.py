"""
Tests unitarios para el cliente del SOC.

Se usa httpx.MockTransport: ninguna llamada sale a la red.
"""
from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from soc_sync.core.config import Settings
from soc_sync.infrastructure.external.soc.soc_client import (
    SocApiClient,
    SocApiError,
    SocApiKeys,
    SocCredentials,
    build_soc_client,
    build_soc_params,
    build_soc_url,
    mask_chave,
    parse_soc_payload,
)
from soc_sync.infrastructure.external.soc.types import (
    SocCompanyRecord,
    SocEndpoint,
    SocUnitRecord,
)

BASE_URL = "https://soc.test/WebSoc/exportadados"


def _credentials() -> SocCredentials:
    return SocCredentials(
        empresa="999",
        api_keys=SocApiKeys(
            companies="k-comp",
            units="k-unit",
            sectors="k-sect",
            jobs="k-job",
            hierarchy="k-hier",
        ),
    )


def _client(handler, **kwargs) -> SocApiClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SocApiClient(_credentials(), base_url=BASE_URL, http_client=http, **kwargs)


def _parametro(request: httpx.Request) -> dict:
    query = parse_qs(urlsplit(str(request.url)).query)
    return json.loads(query["parametro"][0])


# =============================================================================
# URL
# =============================================================================

def test_build_soc_params_keeps_order_and_omits_ativo() -> None:
    params = build_soc_params(empresa="1", endpoint=SocEndpoint.COMPANIES, chave="abc")
    assert list(params) == ["empresa", "codigo", "chave", "tipoSaida"]
    assert params["codigo"] == "200267"
    assert params["tipoSaida"] == "json"


def test_build_soc_params_includes_empty_ativo() -> None:
    params = build_soc_params(empresa="1", endpoint=SocEndpoint.UNITS, chave="abc", ativo="")
    assert params["ativo"] == ""


def test_build_soc_url_is_compact_uri_component() -> None:
    url = build_soc_url(BASE_URL, {"empresa": "1", "codigo": "200267"})
    assert url == (
        f"{BASE_URL}?parametro="
        "%7B%22empresa%22%3A%221%22%2C%22codigo%22%3A%22200267%22%7D"
    )


# =============================================================================
# Parseo
# =============================================================================

def test_parse_single_object_is_normalized_to_list() -> None:
    records = parse_soc_payload('{"CODIGO": "1", "NOMEABREVIADO": "Acme"}', SocCompanyRecord)
    assert len(records) == 1
    assert records[0].code == "1"
    assert records[0].short_name == "Acme"


def test_parse_normalizes_nulls_and_numbers() -> None:
    records = parse_soc_payload(
        '[{"CODIGO": 10, "NOMEABREVIADO": null, "ATIVO": 1, "EXTRA": "x"}]',
        SocCompanyRecord,
    )
    assert records[0].code == "10"
    assert records[0].short_name == ""
    assert records[0].active is True


def test_parse_rejects_scalar_payload() -> None:
    with pytest.raises(ValueError):
        parse_soc_payload('"boom"', SocCompanyRecord)


# =============================================================================
# Cliente
# =============================================================================

@pytest.mark.asyncio
async def test_fetch_companies_decodes_latin1() -> None:
    body = json.dumps([{"CODIGO": "1", "NOMEABREVIADO": "São Paulo Ltda", "ATIVO": "1"}], ensure_ascii=False)

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body.encode("iso-8859-1"))

    records = await _client(handler).fetch_companies()

    assert records[0].short_name == "São Paulo Ltda"


@pytest.mark.asyncio
async def test_fetch_units_sends_configured_empresa_key_and_ativo() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(_parametro(request))
        return httpx.Response(200, content=b"[]")

    client = _client(handler)
    await client.fetch_units()
    await client.fetch_units(active_only=True)

    assert seen[0] == {
        "empresa": "999",
        "codigo": "200266",
        "chave": "k-unit",
        "tipoSaida": "json",
        "ativo": "",
    }
    assert seen[1]["ativo"] == "1"


@pytest.mark.asyncio
async def test_fetch_hierarchy_uses_requested_company() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(_parametro(request))
        return httpx.Response(
            200,
            content=b'{"NOMEUNIDADE": "HQ", "NOMESETOR": "Finance", "NOMECARGO": ""}',
        )

    records = await _client(handler).fetch_hierarchy("42")

    assert seen[0]["empresa"] == "42"
    assert seen[0]["codigo"] == "198531"
    assert seen[0]["chave"] == "k-hier"
    assert records[0].unit_name == "HQ"
    assert records[0].sector_name == "Finance"


@pytest.mark.asyncio
async def test_invalid_json_raises_soc_api_error_with_url() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>mantenimiento</html>")

    with pytest.raises(SocApiError) as exc_info:
        await _client(handler).fetch_jobs()

    assert exc_info.value.url.startswith(f"{BASE_URL}?parametro=")
    assert "200265" in exc_info.value.url
    # La API key viaja en .url pero nunca en el mensaje
    assert "k-job" in exc_info.value.url
    assert "k-job" not in str(exc_info.value)


@pytest.mark.asyncio
async def test_missing_required_field_raises_soc_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b'[{"NOMEUNIDADE": "HQ"}]')

    with pytest.raises(SocApiError):
        await _client(handler).fetch_units()


@pytest.mark.asyncio
async def test_client_error_is_not_retried() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(401, content=b"chave invalida")

    with pytest.raises(SocApiError) as exc_info:
        await _client(handler).fetch_sectors()

    assert len(calls) == 1
    assert "401" in str(exc_info.value)


@pytest.mark.asyncio
async def test_server_error_is_retried_then_succeeds() -> None:
    responses = [
        httpx.Response(503),
        httpx.Response(429, headers={"Retry-After": "0"}),
        httpx.Response(200, content=b'[{"CODIGO": "1"}]'),
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return responses.pop(0)

    with patch("asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
        records = await _client(handler, max_retries=2).fetch_companies()

    assert [r.code for r in records] == ["1"]
    assert mock_sleep.await_count == 2


@pytest.mark.asyncio
async def test_server_error_exhausts_retries() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    with patch("asyncio.sleep", new_callable=AsyncMock):
        with pytest.raises(SocApiError):
            await _client(handler, max_retries=1).fetch_companies()

    assert len(calls) == 2


@pytest.mark.asyncio
async def test_network_error_raises_soc_api_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(SocApiError) as exc_info:
        await _client(handler).fetch_companies()

    assert exc_info.value.url


@pytest.mark.asyncio
async def test_custom_decoder_bypasses_charset() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"ignored")

    client = _client(
        handler,
        decoder=lambda raw: '[{"CODIGOEMPRESA": "1", "CODIGOUNIDADE": "U1", "NOMEUNIDADE": "HQ"}]',
    )
    records = await client.fetch_units()

    assert isinstance(records[0], SocUnitRecord)
    assert records[0].name == "HQ"


def test_build_soc_client_reads_settings() -> None:
    cfg = Settings(
        SOC_BASE_URL=BASE_URL,
        SOC_EMPRESA="123",
        SOC_API_KEY_COMPANIES="a",
        SOC_API_KEY_UNITS="b",
        SOC_API_KEY_SECTORS="c",
        SOC_API_KEY_JOBS="d",
        SOC_API_KEY_HIERARCHY="e",
        SOC_MAX_RETRIES=5,
    )
    client = build_soc_client(cfg)

    assert client._creds.empresa == "123"
    assert client._creds.api_keys.hierarchy == "e"
    assert client._max_retries == 5


def test_mask_chave_hides_only_the_key() -> None:
    url = build_soc_url(BASE_URL, build_soc_params(empresa="1", endpoint=SocEndpoint.JOBS, chave="s3cr3t"))
    masked = mask_chave(url)

    assert "s3cr3t" not in masked
    assert "200265" in masked
    assert masked.startswith(f"{BASE_URL}?parametro=")
