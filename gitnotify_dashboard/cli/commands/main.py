# -*- coding: utf-8 -*-
import asyncio
from typing import Awaitable, Callable, TypeVar

import click
from rich.console import Console

from gitnotify_dashboard.clients.config_client import RemoteConfigClient
from gitnotify_dashboard.config.settings import DashboardSettings
from gitnotify_dashboard.exceptions.clients import ConfigClientError, RemoteConfigError

console = Console()

T = TypeVar("T")


@click.group
def cli_start() -> None:
    # GitNotify dashboard root command
    pass


def run_with_client(action: Callable[[RemoteConfigClient], Awaitable[T]]) -> T:
    """Run a single client call against the configured config API, exiting with 1 on failure."""

    async def _run() -> T:
        settings = DashboardSettings()
        async with RemoteConfigClient.from_settings(settings.config_api) as client:
            return await action(client)

    try:
        return asyncio.run(_run())
    except ConfigClientError as exc:
        console.print(describe_error(exc), style="red", markup=False)
        raise SystemExit(1) from exc


def describe_error(exc: ConfigClientError) -> str:
    if isinstance(exc, RemoteConfigError):
        return f"Config API responded with {exc.status_code}: {exc.body}"
    return str(exc)
