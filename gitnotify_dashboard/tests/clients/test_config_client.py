import json
from io import StringIO
from typing import Any

import httpx
import pytest
import pytest_httpx
from loguru import logger

from gitnotify_dashboard.clients.config_client import RemoteConfigClient
from gitnotify_dashboard.config.settings import ConfigApiSettings
from gitnotify_dashboard.exceptions.clients import RemoteConfigError, TransportError
from gitnotify_dashboard.log.sensitive import SensitiveLogFilter
from gitnotify_dashboard.models.config import Configuration


@pytest.fixture
def client(config_api_url: str, config_api_token: str) -> RemoteConfigClient:
    return RemoteConfigClient(endpoint=config_api_url, token=config_api_token)


@pytest.mark.asyncio
async def test_fetch_configuration_sends_bearer_token(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    config_api_url: str,
    full_payload: dict[str, Any],
) -> None:
    httpx_mock.add_response(method="GET", url=config_api_url, json=full_payload)

    async with client:
        configuration = await client.fetch_configuration()

    request = httpx_mock.get_request()
    assert request is not None
    assert request.headers["Authorization"] == "Bearer test-config-token"
    assert configuration.organization == "acme"
    assert configuration.github_app is not None
    assert configuration.github_app.app_id == 12345
    assert configuration.to_payload() == full_payload


@pytest.mark.asyncio
async def test_fetch_configuration_rejected_token(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    config_api_url: str,
) -> None:
    httpx_mock.add_response(
        method="GET", url=config_api_url, status_code=401, text='{"error":"unauthorized"}'
    )

    with pytest.raises(RemoteConfigError) as exc_info:
        await client.fetch_configuration()

    assert exc_info.value.status_code == 401
    assert exc_info.value.body == '{"error":"unauthorized"}'


@pytest.mark.asyncio
async def test_fetch_configuration_only_accepts_200(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    config_api_url: str,
) -> None:
    httpx_mock.add_response(method="GET", url=config_api_url, status_code=204)

    with pytest.raises(RemoteConfigError) as exc_info:
        await client.fetch_configuration()

    assert exc_info.value.status_code == 204


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body, reason",
    [
        ("not json", "body is not valid JSON"),
        ('["a", "list"]', "Input should be a valid dictionary"),
        ('{"organization": "acme", "port": "http"}', "port:"),
    ],
)
async def test_fetch_configuration_malformed_document(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    config_api_url: str,
    body: str,
    reason: str,
) -> None:
    httpx_mock.add_response(method="GET", url=config_api_url, text=body)

    with pytest.raises(RemoteConfigError) as exc_info:
        await client.fetch_configuration()

    assert exc_info.value.status_code == 200
    assert exc_info.value.body.startswith("Malformed configuration document")
    assert reason in exc_info.value.body


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "exception",
    [
        httpx.ConnectError("Name or service not known"),
        httpx.ReadTimeout("timed out"),
        httpx.RemoteProtocolError("Server disconnected without sending a response."),
        httpx.DecodingError("Error -3 while decompressing data: incorrect header check"),
        httpx.TooManyRedirects("Exceeded maximum allowed redirects."),
    ],
)
async def test_incomplete_requests_raise_transport_error(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    exception: Exception,
) -> None:
    httpx_mock.add_exception(exception)

    with pytest.raises(TransportError):
        await client.fetch_configuration()


@pytest.mark.asyncio
async def test_replace_configuration_puts_full_document(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    config_api_url: str,
    full_payload: dict[str, Any],
) -> None:
    httpx_mock.add_response(method="PUT", url=config_api_url, status_code=200)
    configuration = Configuration.model_validate(full_payload)

    await client.replace_configuration(configuration)

    request = httpx_mock.get_request()
    assert request is not None
    assert request.method == "PUT"
    assert request.headers["Authorization"] == "Bearer test-config-token"
    assert request.headers["Content-Type"] == "application/json"
    assert json.loads(request.content) == full_payload


@pytest.mark.asyncio
async def test_replace_configuration_surfaces_body_verbatim(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    config_api_url: str,
    acme_payload: dict[str, Any],
) -> None:
    httpx_mock.add_response(
        method="PUT", url=config_api_url, status_code=500, text="internal error"
    )

    with pytest.raises(RemoteConfigError) as exc_info:
        await client.replace_configuration(Configuration.model_validate(acme_payload))

    assert exc_info.value.status_code == 500
    assert exc_info.value.body == "internal error"


@pytest.mark.asyncio
async def test_failed_response_is_logged(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    config_api_url: str,
    acme_payload: dict[str, Any],
) -> None:
    """Error bodies with curly braces must not break log formatting."""
    httpx_mock.add_response(
        method="PUT",
        url=config_api_url,
        status_code=400,
        text='{"error":"invalid config: port must be between 1 and 65535"}',
    )
    log_capture = StringIO()
    logger_id = logger.add(log_capture, level="ERROR", format="{message}")

    try:
        with pytest.raises(RemoteConfigError):
            await client.replace_configuration(
                Configuration.model_validate(acme_payload)
            )
        log_output = log_capture.getvalue()
        assert "Request failed with status code: 400" in log_output
        assert "port must be between 1 and 65535" in log_output
    finally:
        logger.remove(logger_id)


@pytest.mark.asyncio
async def test_failed_response_body_is_masked_in_every_log_field(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
    config_api_url: str,
    acme_payload: dict[str, Any],
) -> None:
    log_filter = SensitiveLogFilter()
    log_filter.hide_sensitive_strings("s3cret")
    httpx_mock.add_response(
        method="PUT",
        url=config_api_url,
        status_code=400,
        text='{"error":"webhook_secret s3cret is too short"}',
    )
    log_capture = StringIO()
    logger_id = logger.add(
        log_capture,
        level="ERROR",
        format="{message} | {extra}",
        filter=log_filter.create_filter(full_hide=True),
    )

    try:
        with pytest.raises(RemoteConfigError):
            await client.replace_configuration(
                Configuration.model_validate(acme_payload)
            )
        log_output = log_capture.getvalue()
        assert "Request failed with status code: 400" in log_output
        assert "s3cret" not in log_output
    finally:
        logger.remove(logger_id)


@pytest.mark.asyncio
async def test_check_health_uses_service_origin(
    httpx_mock: pytest_httpx.HTTPXMock,
    client: RemoteConfigClient,
) -> None:
    httpx_mock.add_response(
        method="GET",
        url="http://gitnotify.test/health",
        json={"status": "healthy", "service": "gitnotify"},
    )

    assert await client.check_health() == {"status": "healthy", "service": "gitnotify"}


def test_from_settings(config_api_url: str, config_api_token: str) -> None:
    settings = ConfigApiSettings(url=config_api_url, token=config_api_token)

    client = RemoteConfigClient.from_settings(settings)

    assert client.endpoint == config_api_url
    assert client.headers == {"Authorization": f"Bearer {config_api_token}"}
