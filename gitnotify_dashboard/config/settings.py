from typing import Literal

from pydantic import AnyHttpUrl, Field

from gitnotify_dashboard.config.base import BaseDashboardModel, BaseDashboardSettings

LogLevelType = Literal["ERROR", "WARNING", "INFO", "DEBUG", "CRITICAL"]

DEFAULT_CONFIG_API_URL = "http://localhost:8080/api/config"


class ConfigApiSettings(BaseDashboardModel):
    url: AnyHttpUrl = Field(default=DEFAULT_CONFIG_API_URL, validate_default=True)
    token: str = Field(..., json_schema_extra={"sensitive": True})
    # Seconds; None leaves requests without a timeout
    client_timeout: float | None = 60.0

    @property
    def endpoint(self) -> str:
        return str(self.url)


class ApplicationSettings(BaseDashboardModel):
    log_level: LogLevelType = "INFO"
    host: str = "127.0.0.1"
    port: int = 3000


class DashboardSettings(BaseDashboardSettings):
    config_api: ConfigApiSettings
    application: ApplicationSettings = Field(default_factory=ApplicationSettings)
