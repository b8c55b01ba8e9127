from gitnotify_dashboard.exceptions.base import BaseDashboardException


class ConfigClientError(BaseDashboardException):
    pass


class RemoteConfigError(ConfigClientError):
    """The configuration service answered with a non-success status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Request failed with status code: {status_code}, Error: {body}")


class TransportError(ConfigClientError):
    """The request never reached the configuration service."""

    def __init__(self, message: str = "Could not reach the configuration service") -> None:
        self.message = message
        super().__init__(message)
