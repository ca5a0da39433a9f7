"""FastAPI application factory for the mcp-res-proxy HTTP front-end."""

import logging
import sys
from typing import Optional, TextIO

import structlog
from fastapi import FastAPI

from . import __version__
from .config import Settings, get_settings
from .middleware import RequestLoggingMiddleware
from .routers import health_router, proxy_router
from .services import Forwarder, ForwardingEngine


def configure_logging(settings: Settings, stream: Optional[TextIO] = None) -> None:
    """Configure structlog for the process.

    Stdio mode passes ``sys.stderr`` so that stdout carries protocol traffic only.
    """
    level = "DEBUG" if settings.debug else settings.log_level
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
            if settings.debug
            else structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level.upper())
        ),
        logger_factory=structlog.WriteLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=True,
    )


def create_app(
    settings: Optional[Settings] = None,
    forwarder: Optional[Forwarder] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="mcp-res-proxy",
        description="Forwarding gateway in front of an arbitrary HTTP API",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.engine = ForwardingEngine(settings, forwarder)

    app.add_middleware(RequestLoggingMiddleware)

    # Include routers
    app.include_router(health_router)
    mount = settings.mount_prefix.strip("/")
    app.include_router(proxy_router, prefix=f"/{mount}" if mount else "")

    return app
