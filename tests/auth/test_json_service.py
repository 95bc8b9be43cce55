from unittest.mock import MagicMock

import httpx
import pytest
import respx
from httpx import Response

from oidcmetadatalib.auth.exceptions.metadata_transport_exception import (
    MetadataTransportException,
)
from oidcmetadatalib.auth.http.json_service import JsonService
from oidcmetadatalib.utilities.environment.runtime_environment import (
    DefaultRuntimeEnvironment,
    NullRuntimeEnvironment,
)

URL = "https://issuer.example/.well-known/openid-configuration"


@pytest.fixture
def json_service() -> JsonService:
    return JsonService(environment=DefaultRuntimeEnvironment())


def test_requires_runtime_environment() -> None:
    with pytest.raises(ValueError):
        JsonService(environment=None)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        JsonService(environment=MagicMock())


@pytest.mark.asyncio
async def test_returns_json_object(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        route = respx_mock.get(URL).mock(
            return_value=Response(200, json={"issuer": "https://issuer.example"})
        )
        document = await json_service.get_json_async(url=URL)

    assert document == {"issuer": "https://issuer.example"}
    assert route.calls.last.request.headers["accept"] == "application/json"


@pytest.mark.asyncio
async def test_accepts_content_type_with_parameters(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(
            return_value=Response(
                200,
                content=b'{"a": 1}',
                headers={"content-type": "application/json; charset=utf-8"},
            )
        )
        assert await json_service.get_json_async(url=URL) == {"a": 1}


@pytest.mark.asyncio
async def test_rejects_unlisted_content_type(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(
            return_value=Response(
                200,
                content=b'{"keys": []}',
                headers={"content-type": "application/jwk-set+json"},
            )
        )
        with pytest.raises(MetadataTransportException) as exc_info:
            await json_service.get_json_async(url=URL)

        assert "Content-Type" in exc_info.value.message
        assert exc_info.value.status_code == 200

        document = await json_service.get_json_async(
            url=URL, additional_content_types=["application/jwk-set+json"]
        )
        assert document == {"keys": []}


@pytest.mark.asyncio
async def test_rejects_missing_content_type(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(return_value=Response(200, content=b'{"a": 1}'))
        with pytest.raises(MetadataTransportException):
            await json_service.get_json_async(url=URL)


@pytest.mark.asyncio
async def test_rejects_error_status(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(return_value=Response(500, json={"error": "boom"}))
        with pytest.raises(MetadataTransportException) as exc_info:
            await json_service.get_json_async(url=URL)

    assert exc_info.value.status_code == 500
    assert exc_info.value.url == URL


@pytest.mark.asyncio
async def test_rejects_connection_error(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(MetadataTransportException) as exc_info:
            await json_service.get_json_async(url=URL)

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)


@pytest.mark.asyncio
async def test_rejects_timeout(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(side_effect=httpx.ReadTimeout("slow"))
        with pytest.raises(MetadataTransportException):
            await json_service.get_json_async(url=URL)


@pytest.mark.asyncio
async def test_rejects_invalid_json(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(
            return_value=Response(
                200,
                content=b"{not json",
                headers={"content-type": "application/json"},
            )
        )
        with pytest.raises(MetadataTransportException) as exc_info:
            await json_service.get_json_async(url=URL)

    assert "not valid JSON" in exc_info.value.message


@pytest.mark.asyncio
async def test_rejects_non_object_json(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(return_value=Response(200, json=["a", "b"]))
        with pytest.raises(MetadataTransportException):
            await json_service.get_json_async(url=URL)


@pytest.mark.asyncio
async def test_empty_url_raises() -> None:
    json_service = JsonService(environment=DefaultRuntimeEnvironment())
    with pytest.raises(ValueError):
        await json_service.get_json_async(url="")


@pytest.mark.asyncio
async def test_null_environment_has_no_network() -> None:
    json_service = JsonService(environment=NullRuntimeEnvironment())
    with pytest.raises(MetadataTransportException) as exc_info:
        await json_service.get_json_async(url=URL)

    assert "No HTTP client" in exc_info.value.message


@pytest.mark.asyncio
async def test_rejects_body_that_is_not_utf8(json_service: JsonService) -> None:
    with respx.mock() as respx_mock:
        respx_mock.get(URL).mock(
            return_value=Response(
                200,
                content=b'{"issuer": "\xff\xfe"}',
                headers={"content-type": "application/json"},
            )
        )
        with pytest.raises(MetadataTransportException) as exc_info:
            await json_service.get_json_async(url=URL)

    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)
