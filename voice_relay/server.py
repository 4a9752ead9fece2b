"""FastAPI server relaying browser voice sessions to the OpenAI Realtime API."""

from __future__ import annotations

import os
import logging
from typing import Any
from datetime import datetime, timezone
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import ORJSONResponse

from voice_relay.state.settings import AppSettings
from voice_relay.runtime.settings import load_settings
from voice_relay.runtime.logging import configure_logging
from voice_relay.runtime.dependencies import build_runtime_deps
from voice_relay.handlers.websocket.manager import handle_websocket_connection
from voice_relay.config.server import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT, SERVER_VERSION

logger = logging.getLogger(__name__)

configure_logging()


def _runtime_deps(app: FastAPI):
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(settings: AppSettings | None = None) -> FastAPI:
    settings = settings or load_settings()

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.runtime_deps = build_runtime_deps(settings)
        logger.info(
            "runtime: ready environment=%s ws_path=%s",
            settings.environment,
            settings.websocket.endpoint_path,
        )
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "version": SERVER_VERSION,
        }

    @app.get("/healthz")
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/api/status")
    async def api_status() -> dict[str, Any]:
        deps = _runtime_deps(app)
        return {
            "openai": deps.realtime_bridge.configured,
            "n8n": deps.workflow.configured,
            "environment": deps.settings.environment,
        }

    @app.get("/api/n8n/status")
    async def workflow_status() -> dict[str, Any]:
        return _runtime_deps(app).workflow.status()

    @app.get("/api/n8n/health")
    async def workflow_health() -> dict[str, Any]:
        return await _runtime_deps(app).workflow.health_check()

    @app.post("/api/n8n/trigger")
    async def trigger_workflow(request: Request) -> Any:
        deps = _runtime_deps(app)
        try:
            body = await request.json()
            result = await deps.workflow.trigger(body)
        except Exception as exc:
            logger.exception("n8n trigger endpoint failed")
            return ORJSONResponse(status_code=500, content={"success": False, "error": str(exc)})
        return {"success": True, "data": result}

    @app.websocket(settings.websocket.endpoint_path)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_websocket_connection(websocket, _runtime_deps(app))

    return app


app = create_app()


def main() -> None:
    host = (os.getenv(ENV_HOST) or DEFAULT_HOST).strip()
    try:
        port = int(os.getenv(ENV_PORT) or DEFAULT_PORT)
    except ValueError:
        logger.warning("Ignoring invalid integer for %s", ENV_PORT)
        port = DEFAULT_PORT
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
