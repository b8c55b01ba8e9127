import click

from gitnotify_dashboard.cli.commands.main import cli_start, console
from gitnotify_dashboard.config.settings import LogLevelType


@cli_start.command()
@click.option(
    "-l",
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="""Set the logging level for the dashboard.
            If not specified, the configured level (INFO by default) is used.""",
)
@click.option(
    "-h",
    "--host",
    "host",
    type=str,
    default=None,
    help="Interface to bind the dashboard to. Defaults to 127.0.0.1.",
)
@click.option(
    "-p",
    "--port",
    "port",
    type=int,
    default=None,
    help="Port to serve the dashboard on. Defaults to 3000.",
)
def serve(log_level: LogLevelType | None, host: str | None, port: int | None) -> None:
    """
    Serves the configuration dashboard.
    """
    from gitnotify_dashboard import run

    console.print("Starting the GitNotify configuration dashboard")
    run(log_level=log_level, host=host, port=port)
