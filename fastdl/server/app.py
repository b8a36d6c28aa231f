"""FastAPI application: static asset mounts plus the update trigger/stream."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sse_starlette.sse import EventSourceResponse

from fastdl.config.models import FastDLConfig
from fastdl.events import FanoutSink, LoggingSink, QueueSink
from fastdl.server.page import render_status_page
from fastdl.service import UpdateService

logger = logging.getLogger(__name__)


def _get_service(request: Request) -> UpdateService:
    return request.app.state.update_service


def create_app(config: FastDLConfig, service: UpdateService | None = None) -> FastAPI:
    """Build the app. One UpdateService (and so one cooldown) per app."""
    service = service or UpdateService(config)
    status_path = config.server.status_path
    output_root = Path(config.paths.output_root).resolve()

    app = FastAPI(title="FastDL", description="FastDL asset mirror and updater")
    app.state.update_service = service
    app.state.config = config

    @app.get(status_path, response_class=HTMLResponse)
    async def status_page() -> str:
        return render_status_page(f"{status_path}/events")

    @app.get(f"{status_path}/events")
    async def update_events(request: Request) -> EventSourceResponse:
        """Opening this stream triggers a run and follows its progress."""
        svc = _get_service(request)
        sink = QueueSink()
        logger.info("Update requested by %s", request.client.host if request.client else "?")
        decision = svc.trigger(FanoutSink(sink, LoggingSink()), on_finish=sink.end)
        if not decision.accepted:
            sink.end()

        async def event_generator() -> AsyncGenerator[dict[str, str], None]:
            try:
                async for event in sink.stream():
                    yield {"event": event.kind.value, "data": event.message}
            finally:
                # the run keeps going if the observer leaves
                sink.close()

        return EventSourceResponse(
            event_generator(),
            ping=15,
            headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
        )

    @app.post(f"{status_path}/trigger")
    async def trigger_update(request: Request) -> JSONResponse:
        decision = _get_service(request).trigger(LoggingSink())
        if decision.accepted:
            return JSONResponse(status_code=202, content={"accepted": True})
        return JSONResponse(
            status_code=429,
            content={"accepted": False, "wait_seconds": decision.wait_seconds},
            headers={"Retry-After": str(decision.wait_seconds)},
        )

    @app.get("/health")
    async def health_check(request: Request) -> dict:
        svc = _get_service(request)
        return {
            "status": "ok",
            "running": svc.running,
            "last_started_at": svc.last_started_at.isoformat() if svc.last_started_at else None,
            "last_error": svc.last_error,
            "last_result": svc.last_result.model_dump() if svc.last_result else None,
        }

    # Static mounts last so they never shadow the routes above
    for project in config.sync.projects:
        project_dir = output_root / project
        project_dir.mkdir(parents=True, exist_ok=True)
        app.mount(f"/{project}", StaticFiles(directory=project_dir), name=f"static-{project}")

    return app
