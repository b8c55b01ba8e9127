import click

from gitnotify_dashboard import __version__
from gitnotify_dashboard.cli.commands.main import cli_start, console


@cli_start.command()
@click.option(
    "-s",
    "--short",
    "short",
    default=False,
    is_flag=True,
    required=False,
    help="Display only the short version number.",
)
def version(short: bool) -> None:
    """
    Displays the version of the dashboard package.
    """
    if short:
        console.print(__version__)
    else:
        console.print(f"GitNotify dashboard version: {__version__}")
