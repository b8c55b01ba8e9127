from typing import Any

import uvicorn

from gitnotify_dashboard.config.settings import DashboardSettings, LogLevelType
from gitnotify_dashboard.log.logger_setup import setup_logger
from gitnotify_dashboard.view.app import create_app


def run(
    log_level: LogLevelType | None = None,
    host: str | None = None,
    port: int | None = None,
    config_override: dict[str, Any] | None = None,
) -> None:
    settings = DashboardSettings(**(config_override or {}))
    application_settings = settings.application
    # Override config with arguments
    if log_level is not None:
        application_settings.log_level = log_level
    if host is not None:
        application_settings.host = host
    if port is not None:
        application_settings.port = port

    setup_logger(application_settings.log_level)

    app = create_app(settings)
    uvicorn.run(app, host=application_settings.host, port=application_settings.port)
