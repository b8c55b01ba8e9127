from .run import run  # noqa: E402
from .version import __version__  # noqa: E402

__all__ = [
    "run",
    "__version__",
]
