"""FastAPI application factory — wires everything together."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from billbot import __version__
from billbot.config import BotConfig
from billbot.connectors.base import ServiceConnector
from billbot.connectors.cloudinary import CloudinaryConnector
from billbot.connectors.line import LineConnector
from billbot.gateway.http_api import router as api_router
from billbot.gateway.router import EventRouter
from billbot.gateway.webhook import router as webhook_router
from billbot.ingest import ImageIngestPipeline
from billbot.messenger import Messenger
from billbot.observability.health import aggregate_health
from billbot.observability.metrics import MetricsCollector

logger = logging.getLogger(__name__)


def create_app(
    config: BotConfig | None = None,
    line: LineConnector | None = None,
    storage: CloudinaryConnector | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    ``line`` and ``storage`` default to real connectors built from ``config``;
    tests pass fakes in their place.
    """
    if config is None:
        config = BotConfig.from_yaml()

    app = FastAPI(title="billbot", version=__version__, docs_url="/docs")

    # -- Connectors --
    if line is None:
        line = LineConnector(
            config.line_channel_access_token,
            api_url=config.line_api_url,
            data_api_url=config.line_data_api_url,
            timeout=config.line_timeout_seconds,
            content_deadline=config.line_content_deadline_seconds,
            max_content_bytes=config.line_max_content_bytes,
        )
    if storage is None:
        storage = CloudinaryConnector(
            config.cloudinary_cloud_name,
            upload_preset=config.cloudinary_upload_preset,
            api_key=config.cloudinary_api_key,
            api_secret=config.cloudinary_api_secret,
            api_url=config.cloudinary_api_url,
            timeout=config.cloudinary_timeout_seconds,
            upload_deadline=config.cloudinary_upload_deadline_seconds,
        )
    connectors: dict[str, ServiceConnector] = {line.name(): line, storage.name(): storage}

    # -- Dispatch --
    metrics = MetricsCollector()
    messenger = Messenger(line)
    pipeline = ImageIngestPipeline(line, storage, messenger, config)
    event_router = EventRouter(messenger, pipeline, config, metrics)

    app.include_router(webhook_router)
    app.include_router(api_router)

    @app.get("/health")
    async def health():
        return await aggregate_health(connectors)

    @app.get("/metrics")
    async def get_metrics():
        return metrics.summary()

    @app.get("/")
    async def root():
        return {"name": "billbot", "version": __version__, "connectors": list(connectors)}

    # -- Lifecycle --
    @app.on_event("startup")
    async def startup():
        for conn in connectors.values():
            try:
                await conn.connect()
            except Exception:
                logger.exception("Failed to connect %s", conn.name())

        if not config.line_channel_secret:
            logger.warning("LINE_CHANNEL_SECRET not set; webhook signatures are not verified")
        if not config.line_channel_access_token:
            logger.warning("LINE_CHANNEL_ACCESS_TOKEN not set; replies will fail")
        logger.info("billbot %s started on %s:%d", __version__, config.host, config.port)

    @app.on_event("shutdown")
    async def shutdown():
        for conn in connectors.values():
            await conn.disconnect()

    # Read by the routes, and by tests
    app.state.config = config
    app.state.metrics = metrics
    app.state.event_router = event_router
    app.state.connectors = connectors

    return app
