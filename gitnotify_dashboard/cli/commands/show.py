import json

from gitnotify_dashboard.cli.commands.main import cli_start, console, run_with_client
from gitnotify_dashboard.clients.config_client import RemoteConfigClient
from gitnotify_dashboard.models.config import Configuration

MASK = "[REDACTED]"


async def _fetch(client: RemoteConfigClient) -> Configuration:
    return await client.fetch_configuration()


@cli_start.command()
def show() -> None:
    """
    Prints the live configuration of the GitNotify service, with the webhook secret masked.
    """
    configuration = run_with_client(_fetch)
    payload = configuration.to_payload()
    if payload.get("webhook_secret"):
        payload["webhook_secret"] = MASK
    console.print_json(json.dumps(payload))
