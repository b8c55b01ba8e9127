import time
import uuid

from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response

from gitnotify_dashboard.exceptions.base import BaseDashboardException

QUIET_PATHS = {"/health", "/docs", "/openapi.json"}


class RequestHandlerMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start_time = time.perf_counter()
        request_id = str(uuid.uuid4())

        with logger.contextualize(request_id=request_id):
            log_level = "DEBUG" if request.url.path in QUIET_PATHS else "INFO"
            logger.bind(url=str(request.url), method=request.method).log(
                log_level, f"Request to {request.url.path} started"
            )
            response = await self._handle_silently(request, call_next)

            time_elapsed = round(time.perf_counter() - start_time, 5)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = str(time_elapsed)
            logger.bind(
                time_elapsed=time_elapsed, response_status=response.status_code
            ).log(log_level, f"Request to {request.url.path} ended")

            return response

    async def _handle_silently(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except BaseDashboardException:
            logger.opt(exception=True).error(
                "Request did not succeed due to a dashboard error"
            )
            return PlainTextResponse(content="Internal server error", status_code=500)
