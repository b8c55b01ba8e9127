import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gitnotify_dashboard.exceptions.models import (
    ConfigValidationError,
    NotificationsValidationError,
)

DEFAULT_PORT = 8080
MIN_PORT = 1
MAX_PORT = 65535

INVALID_JSON_MESSAGE = "Notifications must be valid JSON"
NOT_AN_ARRAY_MESSAGE = "Notifications must be a JSON array of rules"


def describe_validation_error(exc: ValidationError) -> str:
    error = exc.errors(include_url=False)[0]
    location = ".".join(str(part) for part in error["loc"])
    message = error["msg"].removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


class NotificationRule(BaseModel):
    model_config = ConfigDict(extra="allow")

    event_type: str
    # None means the rule matches every action / repository
    actions: list[str] | None = None
    repos: list[str] | None = None

    @field_validator("event_type")
    @classmethod
    def event_type_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must be a non-empty string")
        return value

    @field_validator("actions", "repos")
    @classmethod
    def entries_not_empty(cls, value: list[str] | None) -> list[str] | None:
        if value is not None and any(not entry.strip() for entry in value):
            raise ValueError("entries must be non-empty strings")
        return value


class GitHubAppCredentials(BaseModel):
    model_config = ConfigDict(extra="allow")

    app_id: int | None = None
    installation_id: int | None = None
    private_key_path: str | None = None


class Configuration(BaseModel):
    """
    The full settings document of one GitNotify instance, as exchanged with the config API.

    Dumps only include the keys that were present when the document was loaded (or explicitly
    set afterwards), together with any keys this model does not know about, so a document that is
    loaded and written back unmodified is structurally identical to the one that was read.
    """

    model_config = ConfigDict(extra="allow")

    organization: str = ""
    port: int = DEFAULT_PORT
    webhook_secret: str = Field(default="", repr=False)
    # The service encodes an empty rule list as null
    notifications: list[NotificationRule] | None = Field(default_factory=list)
    # Not editable from the dashboard, carried through saves untouched
    github_app: GitHubAppCredentials | None = None

    def to_payload(self) -> dict[str, Any]:
        # Scalar edits are stored unvalidated until submit, so skip serializer type warnings
        return self.model_dump(mode="json", exclude_unset=True, warnings=False)

    def validate_for_submit(self) -> "Configuration":
        """
        Re-validate the (possibly hand edited) document before it is sent to the service.

        Returns a fresh, fully typed copy; the form posts the port as text, so this is also
        where it becomes an integer.
        """
        try:
            validated = Configuration.model_validate(self.to_payload())
        except ValidationError as exc:
            raise ConfigValidationError(describe_validation_error(exc)) from exc

        if not validated.organization.strip():
            raise ConfigValidationError("organization is required")
        if not validated.webhook_secret:
            raise ConfigValidationError("webhook_secret is required")
        if not MIN_PORT <= validated.port <= MAX_PORT:
            raise ConfigValidationError(
                f"port must be between {MIN_PORT} and {MAX_PORT}"
            )
        return validated


def validate_notifications(candidate: Any) -> list[NotificationRule]:
    if not isinstance(candidate, list):
        raise NotificationsValidationError(NOT_AN_ARRAY_MESSAGE)

    rules = []
    for index, item in enumerate(candidate):
        if not isinstance(item, dict):
            raise NotificationsValidationError(
                f"Notification rule {index} must be a JSON object"
            )
        try:
            rules.append(NotificationRule.model_validate(item))
        except ValidationError as exc:
            raise NotificationsValidationError(
                f"Notification rule {index}: {describe_validation_error(exc)}"
            ) from exc
    return rules


def parse_notifications(raw: str) -> list[NotificationRule]:
    try:
        candidate = json.loads(raw)
    except ValueError as exc:
        raise NotificationsValidationError(INVALID_JSON_MESSAGE) from exc
    return validate_notifications(candidate)


def serialize_notifications(rules: list[NotificationRule]) -> str:
    return json.dumps(
        [rule.model_dump(mode="json", exclude_unset=True) for rule in rules],
        indent=2,
    )
