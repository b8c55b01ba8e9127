from contextlib import asynccontextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Annotated, Any, AsyncIterator

from fastapi import FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from loguru import logger

from gitnotify_dashboard.clients.config_client import RemoteConfigClient
from gitnotify_dashboard.config.settings import DashboardSettings
from gitnotify_dashboard.log.sensitive import sensitive_log_filter
from gitnotify_dashboard.session.edit_session import (
    ConfigEditSession,
    SessionState,
    SubmitOutcome,
)
from gitnotify_dashboard.view.middlewares import RequestHandlerMiddleware

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


class ConfigDashboard:
    """Owns the remote client and the one edit session of the active configuration page."""

    def __init__(self, client: RemoteConfigClient):
        self.client = client
        self.session: ConfigEditSession | None = None

    async def mount(self) -> ConfigEditSession:
        if self.session is not None:
            self.session.dispose()
        self.session = ConfigEditSession(self.client)
        await self.session.load()
        return self.session


def _render(
    request: Request, session: ConfigEditSession, status_code: int = 200
) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "config.html",
        {"snapshot": session.snapshot(), "states": SessionState},
        status_code=status_code,
    )


def create_app(
    settings: DashboardSettings, client: RemoteConfigClient | None = None
) -> FastAPI:
    # add the deployment secrets to the sensitive patterns to mask out
    sensitive_log_filter.hide_sensitive_strings(*settings.get_sensitive_fields_data())
    dashboard = ConfigDashboard(
        client or RemoteConfigClient.from_settings(settings.config_api)
    )

    @asynccontextmanager
    async def lifecycle(_: FastAPI) -> AsyncIterator[None]:
        try:
            yield None
        finally:
            if dashboard.session is not None:
                dashboard.session.dispose()
            await dashboard.client.aclose()

    app = FastAPI(title="GitNotify Dashboard", lifespan=lifecycle)
    app.add_middleware(RequestHandlerMiddleware)
    app.state.dashboard = dashboard

    @app.get("/", include_in_schema=False)
    async def index() -> RedirectResponse:
        return RedirectResponse(url="/config")

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "service": "gitnotify-dashboard"}

    @app.get("/config", response_class=HTMLResponse)
    async def show_config(request: Request) -> HTMLResponse:
        session = await dashboard.mount()
        return _render(request, session)

    @app.post("/config", response_class=HTMLResponse)
    async def save_config(
        request: Request,
        organization: Annotated[str, Form()] = "",
        port: Annotated[str, Form()] = "",
        webhook_secret: Annotated[str, Form()] = "",
        notifications: Annotated[str, Form()] = "",
    ) -> Response:
        session = dashboard.session
        if session is None or session.state not in (
            SessionState.READY,
            SessionState.SAVING,
        ):
            return RedirectResponse(url="/config", status_code=303)
        if session.is_saving:
            return _render(request, session, status_code=409)

        session.set_field("organization", organization)
        session.set_field("port", port)
        # The secret is never rendered back, an empty field keeps the current one
        if webhook_secret:
            session.set_field("webhook_secret", webhook_secret)
        session.set_notifications_text(notifications)

        outcome = await session.submit()
        logger.info(f"Configuration submit finished with outcome {outcome.value}")
        return _render(
            request,
            session,
            status_code=409 if outcome == SubmitOutcome.BUSY else 200,
        )

    @app.get("/api/session")
    async def session_state() -> dict[str, Any]:
        if dashboard.session is None:
            return {"state": SessionState.IDLE.value}
        snapshot = dashboard.session.snapshot()
        return {**asdict(snapshot), "can_submit": snapshot.can_submit}

    return app
