"""
Slack slash commands that trigger a sync.
"""

import logging
import re
from typing import Any, Awaitable, Callable, Dict, Optional

from slack_bolt.async_app import AsyncApp
from slack_sdk.errors import SlackApiError

from .config import Settings
from .processor import SyncResult

logger = logging.getLogger(__name__)

STARTING_TEXT = (
    "Starting QC sync: reading Google Sheet and writing Shopify metafields "
    "into columns D–G…"
)

# "<#C0123|qc-team>" as Slack escapes it, or a bare channel ID
_CHANNEL_MENTION = re.compile(r"^<#([A-Z0-9]+)(?:\|[^>]*)?>$")
_CHANNEL_ID = re.compile(r"^[CGD][A-Z0-9]{6,}$")

RunCallable = Callable[[], Awaitable[SyncResult]]


def parse_channel_argument(text: Optional[str]) -> Optional[str]:
    """Channel ID given as the command argument, if any."""
    arg = (text or "").strip().split()
    if not arg:
        return None
    token = arg[0]
    match = _CHANNEL_MENTION.match(token)
    if match:
        return match.group(1)
    if _CHANNEL_ID.match(token):
        return token
    return None


def resolve_target_channel(body: Dict[str, Any], watch_channel_id: Optional[str]) -> str:
    """Argument first, then the configured watch channel, then the invoking channel."""
    return (
        parse_channel_argument(body.get("text"))
        or watch_channel_id
        or body["channel_id"]
    )


async def handle_sync_command(ack, body: Dict[str, Any], client, *, settings: Settings, run: RunCallable) -> None:
    """
    Acknowledge, post a starting notice, run the sync and reply in its thread.

    The run itself never raises (see run_once), so a reply is always posted
    once the starting notice went out.
    """
    await ack()

    channel = resolve_target_channel(body, settings.watch_channel_id)
    user = body.get("user_name") or body.get("user_id")
    logger.info(f"{settings.slack_command} from {user}, reporting to {channel}")

    try:
        parent = await client.chat_postMessage(channel=channel, text=STARTING_TEXT)
    except SlackApiError as e:
        logger.error(f"Could not post starting notice to {channel}: {e}")
        return

    thread_ts = parent["ts"]
    result = await run()

    try:
        await client.chat_postMessage(channel=channel, thread_ts=thread_ts, text=result.message)
    except SlackApiError as e:
        logger.error(f"Could not post sync summary to {channel}: {e}")


def register_commands(app: AsyncApp, settings: Settings, run: RunCallable) -> None:
    """Attach the sync and ping commands to a Bolt app."""

    @app.command(settings.slack_command)
    async def sync_command(ack, body, client):
        await handle_sync_command(ack, body, client, settings=settings, run=run)

    @app.command("/ping")
    async def ping_command(ack, respond):
        await ack()
        await respond(text="pong")

    @app.error
    async def on_error(error, body):
        logger.error(f"Bolt error: {error}", exc_info=error)


def build_slack_app(settings: Settings, run: RunCallable) -> AsyncApp:
    """Create the Bolt app for the HTTP events endpoint."""
    settings.require_slack()
    app = AsyncApp(
        token=settings.slack_bot_token,
        signing_secret=settings.slack_signing_secret,
    )
    register_commands(app, settings, run)
    return app
