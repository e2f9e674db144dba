"""FastAPI server for ticket metrics."""

from __future__ import annotations

import json

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.concurrency import run_in_threadpool

from .config import Settings
from .handler import handle_event
from .store import MetricsStoreWriter, build_store_writer


def create_app(writer: MetricsStoreWriter | None = None, settings: Settings | None = None) -> FastAPI:
    if settings is None:
        settings = Settings.from_env()
    if writer is None:
        writer = build_store_writer(settings)

    app = FastAPI(title="Ticket Metrics API", version="1.0.0")
    app.state.writer = writer
    app.state.settings = settings

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/analytics")
    async def process_analytics(request: Request) -> Response:
        raw = await request.body()
        try:
            payload = json.loads(raw) if raw else None
        except ValueError:
            payload = None

        result = await run_in_threadpool(handle_event, payload, writer, settings)
        return Response(
            content=result["body"],
            status_code=result["statusCode"],
            headers=result["headers"],
            media_type="application/json",
        )

    return app
