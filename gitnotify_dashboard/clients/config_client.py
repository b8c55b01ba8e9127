from typing import Any

import httpx
from loguru import logger
from pydantic import ValidationError

from gitnotify_dashboard.clients.utils import handle_status_code
from gitnotify_dashboard.config.settings import ConfigApiSettings
from gitnotify_dashboard.exceptions.clients import RemoteConfigError, TransportError
from gitnotify_dashboard.models.config import Configuration, describe_validation_error

HEALTH_PATH = "/health"


class RemoteConfigClient:
    """
    Async client for the GitNotify config API.

    The endpoint and bearer token are handed in once at construction. Every call is a single
    request: there is no token refresh and no retry, a rejected token surfaces as a
    `RemoteConfigError` with status 401.
    """

    def __init__(
        self,
        endpoint: str,
        token: str,
        timeout: float | None = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.endpoint = endpoint
        self._token = token
        self.client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @classmethod
    def from_settings(cls, settings: ConfigApiSettings) -> "RemoteConfigClient":
        return cls(
            endpoint=settings.endpoint,
            token=settings.token,
            timeout=settings.client_timeout,
        )

    async def __aenter__(self) -> "RemoteConfigClient":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    @property
    def headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._token}"}

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug(f"Sending {method} request to {url}")
        try:
            return await self.client.request(
                method, url, headers=self.headers, **kwargs
            )
        except httpx.RequestError as exc:
            logger.error(f"{method} {url} did not complete: {exc!r}")
            raise TransportError(
                f"Could not reach the configuration service: {exc}"
            ) from exc

    async def fetch_configuration(self) -> Configuration:
        response = await self._send("GET", self.endpoint)
        handle_status_code(response, expected_status=200)

        try:
            configuration = Configuration.model_validate(response.json())
        except ValueError as exc:
            # pydantic's ValidationError is a ValueError too
            reason = (
                describe_validation_error(exc)
                if isinstance(exc, ValidationError)
                else "body is not valid JSON"
            )
            logger.error(f"Config API returned a malformed configuration: {reason}")
            raise RemoteConfigError(
                response.status_code, f"Malformed configuration document: {reason}"
            ) from exc

        logger.info(
            f"Fetched configuration for organization {configuration.organization!r} "
            f"with {len(configuration.notifications or [])} notification rules"
        )
        return configuration

    async def replace_configuration(self, configuration: Configuration) -> None:
        response = await self._send(
            "PUT",
            self.endpoint,
            json=configuration.to_payload(),
        )
        handle_status_code(response)
        logger.info(
            f"Replaced configuration for organization {configuration.organization!r}"
        )

    async def check_health(self) -> dict[str, Any]:
        url = str(httpx.URL(self.endpoint).join(HEALTH_PATH))
        response = await self._send("GET", url)
        handle_status_code(response)
        return response.json()
