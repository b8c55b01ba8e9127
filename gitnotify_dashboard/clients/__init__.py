from .config_client import RemoteConfigClient

__all__ = ["RemoteConfigClient"]
