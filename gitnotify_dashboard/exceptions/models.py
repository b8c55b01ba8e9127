from gitnotify_dashboard.exceptions.base import BaseDashboardException


class ConfigValidationError(BaseDashboardException):
    """Raised when a configuration document fails local validation."""


class NotificationsValidationError(ConfigValidationError):
    """Raised when the notifications document is not a well-formed list of rules."""
