from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from loguru import logger

from gitnotify_dashboard.clients.config_client import RemoteConfigClient
from gitnotify_dashboard.exceptions.clients import (
    ConfigClientError,
    RemoteConfigError,
    TransportError,
)
from gitnotify_dashboard.exceptions.models import ConfigValidationError
from gitnotify_dashboard.exceptions.session import (
    InvalidSessionStateError,
    UnknownConfigFieldError,
)
from gitnotify_dashboard.log.sensitive import sensitive_log_filter
from gitnotify_dashboard.models.config import (
    Configuration,
    parse_notifications,
    serialize_notifications,
)

SUCCESS_MESSAGE = "Configuration updated successfully!"
CONNECTIVITY_ERROR_MESSAGE = (
    "Could not reach the configuration service, check your connection and try again"
)

EDITABLE_FIELDS = {
    "organization": "organization",
    "port": "port",
    "webhook_secret": "webhook_secret",
    "webhookSecret": "webhook_secret",
}


class SessionState(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"
    LOAD_FAILED = "load_failed"
    DISPOSED = "disposed"


class SubmitOutcome(StrEnum):
    SAVED = "saved"
    INVALID = "invalid"
    FAILED = "failed"
    BUSY = "busy"


@dataclass(frozen=True)
class SessionSnapshot:
    state: SessionState
    organization: str = ""
    port: Any = None
    has_webhook_secret: bool = False
    # A new secret was entered but not saved yet
    webhook_secret_pending: bool = False
    notifications_text: str = ""
    last_error: str | None = None
    last_success_message: str | None = None
    load_error: str | None = None
    is_dirty: bool = False

    @property
    def can_submit(self) -> bool:
        return self.state == SessionState.READY


def _describe_client_error(exc: ConfigClientError) -> str:
    if isinstance(exc, RemoteConfigError):
        return exc.body
    if isinstance(exc, TransportError):
        return CONNECTIVITY_ERROR_MESSAGE
    return str(exc)


class ConfigEditSession:
    """
    Edit state of the configuration page, from the initial load to every save.

    IDLE -> LOADING -> READY (-> SAVING -> READY)*, with LOAD_FAILED reachable only from LOADING.
    The session keeps a working copy of the configuration and a separate raw text buffer for the
    notifications document; the buffer is only parsed when the user submits.

    Remote calls are awaited while the session is in LOADING / SAVING. Their results are applied
    only if the session is still in that state when they resolve, so a session that was disposed
    in the meantime is left untouched.
    """

    def __init__(self, client: RemoteConfigClient):
        self.client = client
        self.state = SessionState.IDLE
        self.baseline: Configuration | None = None
        self.working: Configuration | None = None
        self._baseline_notifications_text = ""
        self.notifications_text = ""
        self.last_error: str | None = None
        self.last_success_message: str | None = None
        self.load_error: str | None = None

    @property
    def is_saving(self) -> bool:
        return self.state == SessionState.SAVING

    @property
    def is_dirty(self) -> bool:
        if self.working is None or self.baseline is None:
            return False
        return (
            self.working.to_payload() != self.baseline.to_payload()
            or self.notifications_text != self._baseline_notifications_text
        )

    def _ensure_state(self, *expected: SessionState) -> None:
        if self.state not in expected:
            raise InvalidSessionStateError(
                f"Operation not allowed while the session is {self.state.value}"
            )

    def _resolve(self, issued_in: SessionState, new_state: SessionState) -> bool:
        if self.state != issued_in:
            logger.debug(
                f"Dropping result of a {issued_in.value} call, session is now {self.state.value}"
            )
            return False
        self.state = new_state
        return True

    async def load(self) -> None:
        self._ensure_state(SessionState.IDLE)
        self.state = SessionState.LOADING
        logger.info("Loading configuration")

        try:
            configuration = await self.client.fetch_configuration()
        except ConfigClientError as exc:
            if self._resolve(SessionState.LOADING, SessionState.LOAD_FAILED):
                self.load_error = _describe_client_error(exc)
                logger.error(f"Failed to load configuration: {self.load_error}")
            return

        if not self._resolve(SessionState.LOADING, SessionState.READY):
            return
        if configuration.webhook_secret:
            sensitive_log_filter.hide_sensitive_strings(configuration.webhook_secret)
        self.notifications_text = serialize_notifications(
            configuration.notifications or []
        )
        self._set_baseline(configuration)
        self.working = configuration.model_copy(deep=True)
        logger.info("Configuration loaded")

    def _set_baseline(self, configuration: Configuration) -> None:
        self.baseline = configuration
        self._baseline_notifications_text = self.notifications_text

    def set_field(self, name: str, value: Any) -> None:
        self._ensure_state(SessionState.READY)
        if name not in EDITABLE_FIELDS:
            raise UnknownConfigFieldError(f"{name} is not an editable field")
        assert self.working is not None
        # Validated on submit
        setattr(self.working, EDITABLE_FIELDS[name], value)

    def set_notifications_text(self, raw: str) -> None:
        self._ensure_state(SessionState.READY)
        self.notifications_text = raw

    async def submit(self) -> SubmitOutcome:
        if self.state == SessionState.SAVING:
            logger.warning("A save is already in progress, ignoring submit")
            return SubmitOutcome.BUSY
        self._ensure_state(SessionState.READY)
        assert self.working is not None

        self.state = SessionState.SAVING
        self.last_error = None
        self.last_success_message = None

        try:
            notifications = parse_notifications(self.notifications_text)
            candidate = self.working.model_copy(deep=True)
            # Untouched text keeps the loaded value, including null or a missing key
            if self.notifications_text != self._baseline_notifications_text:
                candidate.notifications = notifications
            candidate = candidate.validate_for_submit()
        except ConfigValidationError as exc:
            self.last_error = str(exc)
            self.state = SessionState.READY
            logger.warning(f"Configuration rejected before saving: {self.last_error}")
            return SubmitOutcome.INVALID

        if candidate.webhook_secret:
            sensitive_log_filter.hide_sensitive_strings(candidate.webhook_secret)
        logger.info("Saving configuration")
        try:
            await self.client.replace_configuration(candidate)
        except ConfigClientError as exc:
            if self._resolve(SessionState.SAVING, SessionState.READY):
                self.last_error = _describe_client_error(exc)
            return SubmitOutcome.FAILED

        if self._resolve(SessionState.SAVING, SessionState.READY):
            self.working = candidate
            self._set_baseline(candidate.model_copy(deep=True))
            self.last_success_message = SUCCESS_MESSAGE
        return SubmitOutcome.SAVED

    def dispose(self) -> None:
        if self.state != SessionState.DISPOSED:
            logger.debug(f"Disposing session in state {self.state.value}")
        self.state = SessionState.DISPOSED
        self.working = None
        self.baseline = None

    def snapshot(self) -> SessionSnapshot:
        if self.working is None:
            return SessionSnapshot(state=self.state, load_error=self.load_error)
        return SessionSnapshot(
            state=self.state,
            organization=self.working.organization,
            port=self.working.port,
            has_webhook_secret=bool(self.working.webhook_secret),
            webhook_secret_pending=(
                self.baseline is not None
                and self.working.webhook_secret != self.baseline.webhook_secret
            ),
            notifications_text=self.notifications_text,
            last_error=self.last_error,
            last_success_message=self.last_success_message,
            is_dirty=self.is_dirty,
        )
