from gitnotify_dashboard.exceptions.base import BaseDashboardException


class SessionError(BaseDashboardException):
    pass


class InvalidSessionStateError(SessionError):
    pass


class UnknownConfigFieldError(SessionError):
    pass
