"""Overlay web server (FastAPI + Server-Sent Events)."""

from .server import create_app, counter_events, bind_socket

__all__ = ["create_app", "counter_events", "bind_socket"]
