"""
QC Sheet Sync - Main Application
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from slack_bolt.adapter.fastapi.async_handler import AsyncSlackRequestHandler

from .config import ConfigError, Settings, load_settings
from .dependencies import (
    init_dependencies, close_dependencies,
    get_resolver, get_run_log, get_sheets, get_shopify
)
from .health import HealthStatus, run_startup_checks
from .processor import SyncResult, run_once
from .slack import build_slack_app

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def create_app(settings: Settings) -> FastAPI:
    """Build the FastAPI app serving Slack commands."""

    async def run() -> SyncResult:
        return await run_once(
            get_sheets(),
            get_resolver(),
            get_run_log(),
            tab_name=settings.sheet_tab_name,
            prefix=settings.order_prefix,
        )

    bolt_app = build_slack_app(settings, run)
    slack_handler = AsyncSlackRequestHandler(bolt_app)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan - startup and shutdown."""
        logger.info("Starting QC Sheet Sync...")
        await init_dependencies(settings)

        # Connectivity checks are informational only and must not delay serving
        app.state.checks = {}
        checks_task = asyncio.create_task(
            run_startup_checks(get_sheets(), get_shopify(), app.state.checks)
        )
        logger.info("Application ready")
        yield
        logger.info("Shutting down...")
        checks_task.cancel()
        with suppress(asyncio.CancelledError):
            await checks_task
        await close_dependencies()

    app = FastAPI(
        title="QC Sheet Sync",
        description="Copy Shopify order metafields into the QC Google Sheet",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.checks = {}

    @app.post("/slack/events")
    async def slack_events(request: Request):
        """Slack slash commands and interactivity."""
        return await slack_handler.handle(request)

    @app.get("/health")
    async def health():
        """Health check endpoint with startup connectivity results."""
        checks = {
            name: status.value if isinstance(status, HealthStatus) else status
            for name, status in app.state.checks.items()
        }
        return {"status": "ok", "checks": checks}

    return app


def main() -> None:
    """Load configuration and serve the app."""
    import uvicorn

    try:
        settings = load_settings()
        settings.require_slack()
    except ConfigError as e:
        configure_logging()
        logger.error(str(e))
        sys.exit(1)

    configure_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
