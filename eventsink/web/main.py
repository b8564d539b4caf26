"""
HTTP surface for eventsink.

Endpoints:
    POST /         Accept one event (JSON object) and archive it in the background.
    POST /test     Archive a fixed test event.
    GET  /ping     Liveness check, plain text ("pong").
    GET  /healthz  Liveness check, JSON body.
    GET  /metrics  Prometheus exposition of output counters.

Uploads run as background tasks so callers get a response immediately; the
outcome is visible through logs and metrics only.

Run:
    uvicorn --factory eventsink.web.main:create_app
"""
from __future__ import annotations

import logging
import socket
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import BackgroundTasks, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from eventsink.events.payload import make_test_event
from eventsink.outputs.client import OutputContext
from eventsink.outputs.wiring import build_context_from_env, build_oci_output_if_configured, load_dotenv_if_enabled

logger = logging.getLogger("eventsink.web")

_UNSET = object()


def create_app(*, output: object = _UNSET, context: Optional[OutputContext] = None) -> FastAPI:
    """Build the app.

    Parameters:
        output: Output to forward events to; read from the environment when
            omitted. Pass None explicitly for an app without outputs.
        context: Metric context; defaults to the output's context.
    """
    if output is _UNSET:
        load_dotenv_if_enabled()
        context = context or build_context_from_env()
        output = build_oci_output_if_configured(context)
    if context is None:
        context = getattr(output, "context", None) or OutputContext()
    if output is None:
        logger.warning("No output configured; POST / and /test will answer 503")

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        context.dispatcher.close()

    app = FastAPI(title="eventsink", description="Archive security events to OCI Object Storage", lifespan=lifespan)
    app.state.output = output
    app.state.context = context

    def _no_output() -> JSONResponse:
        return JSONResponse({"error": "no_output_configured"}, status_code=503)

    @app.post("/")
    async def receive_event(request: Request, background_tasks: BackgroundTasks):
        try:
            payload = await request.json()
        except ValueError:
            return JSONResponse({"error": "invalid_json"}, status_code=400)
        if not isinstance(payload, dict):
            return JSONResponse({"error": "event_must_be_object"}, status_code=400)
        if app.state.output is None:
            return _no_output()
        background_tasks.add_task(app.state.output.upload, payload)
        return JSONResponse({"status": "accepted"})

    @app.post("/test")
    async def send_test_event(background_tasks: BackgroundTasks):
        if app.state.output is None:
            return _no_output()
        background_tasks.add_task(app.state.output.upload, make_test_event(hostname=socket.gethostname()))
        return JSONResponse({"status": "accepted"})

    @app.get("/ping")
    async def ping():
        return PlainTextResponse("pong\n")

    @app.get("/healthz")
    async def healthz():
        return {"status": "ok"}

    @app.get("/metrics")
    async def metrics():
        body, content_type = app.state.context.prometheus.render()
        return Response(content=body, media_type=content_type)

    return app


__all__ = ["create_app"]
