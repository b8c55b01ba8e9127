from .commands import *  # noqa
