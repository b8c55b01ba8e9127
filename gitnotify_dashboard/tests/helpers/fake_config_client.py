import asyncio
import copy
from typing import Any

from gitnotify_dashboard.exceptions.clients import ConfigClientError
from gitnotify_dashboard.models.config import Configuration


class FakeConfigClient:
    """
    In-memory stand-in for RemoteConfigClient.

    Setting `fetch_gate` / `replace_gate` holds the matching call open until the event is set,
    which lets tests observe the session while a remote call is outstanding.
    """

    def __init__(
        self,
        payload: dict[str, Any] | None = None,
        fetch_error: ConfigClientError | None = None,
        replace_error: ConfigClientError | None = None,
    ) -> None:
        self.payload = payload or {}
        self.fetch_error = fetch_error
        self.replace_error = replace_error
        self.fetch_gate: asyncio.Event | None = None
        self.replace_gate: asyncio.Event | None = None
        self.fetch_calls = 0
        self.replaced: list[dict[str, Any]] = []
        self.closed = False

    async def fetch_configuration(self) -> Configuration:
        self.fetch_calls += 1
        if self.fetch_gate is not None:
            await self.fetch_gate.wait()
        if self.fetch_error is not None:
            raise self.fetch_error
        return Configuration.model_validate(copy.deepcopy(self.payload))

    async def replace_configuration(self, configuration: Configuration) -> None:
        self.replaced.append(configuration.to_payload())
        if self.replace_gate is not None:
            await self.replace_gate.wait()
        if self.replace_error is not None:
            raise self.replace_error
        self.payload = configuration.to_payload()

    async def aclose(self) -> None:
        self.closed = True
