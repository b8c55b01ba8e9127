from typing import Any, Generator

import pytest

from gitnotify_dashboard.log.sensitive import SensitiveLogFilter

CONFIG_API_URL = "http://gitnotify.test/api/config"
CONFIG_API_TOKEN = "test-config-token"


@pytest.fixture(autouse=True)
def reset_sensitive_patterns() -> Generator[None, None, None]:
    # Loading a configuration registers its webhook secret on the shared filter
    original_patterns = SensitiveLogFilter.compiled_patterns.copy()
    yield
    SensitiveLogFilter.compiled_patterns = original_patterns


@pytest.fixture
def config_api_url() -> str:
    return CONFIG_API_URL


@pytest.fixture
def config_api_token() -> str:
    return CONFIG_API_TOKEN


@pytest.fixture
def acme_payload() -> dict[str, Any]:
    return {
        "organization": "acme",
        "port": 8080,
        "webhook_secret": "s3cret",
        "notifications": [{"event_type": "pull_request", "actions": ["opened"]}],
    }


@pytest.fixture
def full_payload(acme_payload: dict[str, Any]) -> dict[str, Any]:
    return {
        **acme_payload,
        "notifications": [
            {"event_type": "pull_request", "actions": ["opened", "closed"]},
            {"event_type": "issues", "repos": ["api", "web"]},
            {"event_type": "push"},
        ],
        "github_app": {
            "app_id": 12345,
            "installation_id": 67890,
            "private_key_path": "/etc/gitnotify/app.pem",
        },
    }
