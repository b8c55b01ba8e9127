from typing import Any

from gitnotify_dashboard.cli.commands.main import cli_start, console, run_with_client
from gitnotify_dashboard.clients.config_client import RemoteConfigClient


async def _health(client: RemoteConfigClient) -> dict[str, Any]:
    return await client.check_health()


@cli_start.command()
def status() -> None:
    """
    Checks that the GitNotify service behind the config API is up.
    """
    health = run_with_client(_health)
    console.print(
        f"{health.get('service', 'service')} is {health.get('status', 'unknown')}"
    )
