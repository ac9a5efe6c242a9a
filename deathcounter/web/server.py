"""
Death Counter Overlay Server

Serves the overlay page plus two views of the hub:
- GET /api/deaths   JSON snapshot {"deaths": int, "name": str}
- GET /api/events   Server-Sent Events, one frame on connect and one per change

Usage (from the service):
    app = create_app(counter)
    sock = bind_socket("0.0.0.0", 8080)
    server = uvicorn.Server(build_uvicorn_config(app))
    await server.serve(sockets=[sock])

Then add http://localhost:8080 as a browser source.
"""

import json
import logging
import socket
from pathlib import Path
from typing import AsyncIterator, Awaitable, Callable

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, StreamingResponse

from ..counter import DeathCounter
from ..errors import WebServerError

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"
KEEPALIVE_INTERVAL = 15.0
KEEPALIVE_FRAME = ": keep-alive\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


# ============================================================================
# SERVER-SENT EVENTS
# ============================================================================

def format_event(payload: dict) -> str:
    """One SSE data frame with compact JSON."""
    return f"data: {json.dumps(payload, separators=(',', ':'))}\n\n"


async def counter_events(
    counter: DeathCounter,
    is_disconnected: Callable[[], Awaitable[bool]],
    keepalive: float = KEEPALIVE_INTERVAL,
) -> AsyncIterator[str]:
    """
    Stream the counter: current snapshot first, then one frame per update.

    Ends when the client disconnects or the hub is closed. The subscription
    is removed however the stream ends, including cancellation.
    """
    sub = counter.subscribe()
    try:
        yield format_event(counter.snapshot())

        while not counter.closed:
            woken = await sub.wait(keepalive)
            if counter.closed or await is_disconnected():
                break
            if woken:
                yield format_event(counter.snapshot())
            else:
                yield KEEPALIVE_FRAME
    finally:
        counter.unsubscribe(sub)


def event_stream_response(
    counter: DeathCounter,
    is_disconnected: Callable[[], Awaitable[bool]],
) -> StreamingResponse:
    return StreamingResponse(
        counter_events(counter, is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


# ============================================================================
# APP
# ============================================================================

def create_app(counter: DeathCounter) -> FastAPI:
    """Build the overlay app around an existing hub."""
    app = FastAPI(title="Death Counter Overlay")
    app.state.counter = counter

    @app.get("/", response_class=HTMLResponse)
    async def index():
        """Serve the overlay page."""
        html_path = STATIC_DIR / "index.html"
        if html_path.exists():
            return html_path.read_text(encoding="utf-8")
        return "<h1>Overlay not found</h1>"

    @app.get("/api/deaths")
    async def get_deaths():
        """Current death count as JSON."""
        return JSONResponse(counter.snapshot())

    @app.get("/api/events")
    async def stream_deaths(request: Request):
        """Server-Sent Events stream for live updates."""
        return event_stream_response(counter, request.is_disconnected)

    return app


# ============================================================================
# SERVING
# ============================================================================

def bind_socket(host: str, port: int) -> socket.socket:
    """
    Bind the listening socket up front so a taken port fails fast.

    Raises:
        WebServerError: The port could not be bound
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    try:
        sock.bind((host, port))
    except OSError as e:
        sock.close()
        logger.error(f"Failed to bind to {host}:{port}: {e}")
        raise WebServerError(f"cannot bind web server to {host}:{port}: {e}") from e
    return sock


def build_uvicorn_config(app: FastAPI, log_level: str = "warning") -> uvicorn.Config:
    return uvicorn.Config(
        app,
        log_level=log_level,
        timeout_graceful_shutdown=2,
    )
