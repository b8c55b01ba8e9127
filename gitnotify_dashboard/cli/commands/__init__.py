from .main import cli_start
from .serve import serve
from .show import show
from .status import status
from .version import version

__all__ = [
    "cli_start",
    "serve",
    "show",
    "status",
    "version",
]
