from .config import (
    Configuration,
    GitHubAppCredentials,
    NotificationRule,
    parse_notifications,
    serialize_notifications,
    validate_notifications,
)

__all__ = [
    "Configuration",
    "GitHubAppCredentials",
    "NotificationRule",
    "parse_notifications",
    "serialize_notifications",
    "validate_notifications",
]
