import httpx
from loguru import logger

from gitnotify_dashboard.exceptions.clients import RemoteConfigError


def handle_status_code(
    response: httpx.Response, expected_status: int | None = None
) -> None:
    failed = (
        response.status_code != expected_status
        if expected_status is not None
        else not response.is_success
    )
    if not failed:
        return

    logger.error(
        f"Request failed with status code: {response.status_code}, Error: {response.text}"
    )
    raise RemoteConfigError(response.status_code, response.text)
