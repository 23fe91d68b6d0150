"""Application entry point for holobot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import signal
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

from adapters.mattermost_client import MattermostAPIError, MattermostClient
from adapters.mattermost_transport import MattermostTransport
from client import build_client
from core.actions import build_actions
from core.config import BotConfig, ReconcilerConfig
from core.dispatcher import Dispatcher
from core.errors import ChatClientError
from core.messenger import Messenger
from core.models import Channel, User
from core.reconciler import MembershipReconciler
from core.time_extractor import convert_times
from core.time_table import format_failure, format_time_table

NAME = "HOLOBOT"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", True):
        return []
    values = []
    for name in redact_cfg.get("patterns", ["HOLOBOT_TOKEN", "HOLOBOT_PASSWORD"]):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: dict, project_root: str) -> None:
    if not config.get("enabled", True):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config)
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/holobot.log")
        if not os.path.isabs(path):
            path = os.path.join(project_root, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


async def _update_profile_if_needed(client: MattermostClient, bot_user: User, settings) -> User:
    wanted = {
        "first_name": settings.BOT_FIRST_NAME,
        "last_name": settings.BOT_LAST_NAME,
        "username": settings.BOT_USERNAME,
    }
    current = {
        "first_name": bot_user.first_name,
        "last_name": bot_user.last_name,
        "username": bot_user.username,
    }
    if wanted == current:
        return bot_user
    logging.getLogger(__name__).info("Updating the bot profile to match config")
    return await client.patch_user(bot_user.id, **wanted)


async def _find_or_create_log_channel(client: MattermostClient, team_id: str, name: str) -> Channel:
    try:
        return await client.get_channel_by_name(name, team_id)
    except MattermostAPIError as exc:
        if exc.status != 404:
            raise
    logging.getLogger(__name__).info("Creating the debugging channel %s", name)
    return await client.create_channel(
        team_id,
        name,
        display_name="Debugging For holobot",
        purpose="This is used as a test channel for logging bot debug messages",
    )


async def _resolve_config(client: MattermostClient, bot_user: User, settings) -> BotConfig:
    """Turn configured names into ids once, before any event is handled."""

    public_team = await client.get_team_by_name(settings.PUBLIC_TEAM_NAME)
    private_team = await client.get_team_by_name(settings.PRIVATE_TEAM_NAME)
    announcements = await client.get_channel_by_name(settings.ANNOUNCEMENTS_CHANNEL, public_team.id)

    debugging_channel_id = None
    if settings.DEBUGGING:
        debugging_team = await client.get_team_by_name(settings.DEBUGGING_TEAM_NAME)
        debugging_channel = await _find_or_create_log_channel(client, debugging_team.id, settings.LOG_CHANNEL)
        debugging_channel_id = debugging_channel.id

    return BotConfig(
        bot_user_id=bot_user.id,
        bot_username=bot_user.username,
        long_name=settings.LONG_NAME,
        domain=settings.DOMAIN,
        public_team_id=public_team.id,
        private_team_id=private_team.id,
        announcements_channel_id=announcements.id,
        debugging_channel_id=debugging_channel_id,
        debugging=settings.DEBUGGING,
    )


async def _serve(settings) -> None:
    logger = logging.getLogger(__name__)
    client, bot_user = await build_client(settings.BASE_URL)
    try:
        try:
            await client.ping()
        except ChatClientError as exc:
            raise RuntimeError(f"There was a problem pinging the Mattermost server at {settings.BASE_URL}") from exc

        bot_user = await _update_profile_if_needed(client, bot_user, settings)
        config = await _resolve_config(client, bot_user, settings)
        if config.debugging:
            logger.info("Debugging is on")

        messenger = Messenger(client, config)
        reconciler = MembershipReconciler(
            client,
            messenger,
            ReconcilerConfig(
                interval_seconds=settings.RECONCILER_INTERVAL_SECONDS,
                max_attempts=settings.RECONCILER_MAX_ATTEMPTS,
            ),
        )
        dispatcher = Dispatcher(build_actions(client, client, messenger, reconciler))
        logger.info("%s actions are registered", len(dispatcher.actions))

        transport = MattermostTransport(settings.BASE_URL, client.token or "")
        await transport.connect()

        # Closing the socket makes receive() return None, which ends the loop.
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, lambda: asyncio.ensure_future(transport.close()))

        await messenger.send_debug(f"_{config.long_name} has **started** running_")
        logger.info("Connected. Listening for events...")
        try:
            await dispatcher.run(transport)
        finally:
            await transport.close()
            await messenger.send_debug(f"_{config.long_name} has **stopped** running_")
            if reconciler.pending:
                logger.info("Abandoning %s pending welcome tasks", reconciler.pending)
    finally:
        await client.close()


def _run() -> None:
    import settings

    _print_banner()
    _configure_logging(settings.LOGGING or {}, settings.PROJECT_ROOT)
    logging.getLogger(__name__).info("Starting %s", settings.LONG_NAME)
    asyncio.run(_serve(settings))


def _print_times(message: str) -> None:
    """Print the conversion tables for a message without connecting."""

    outcomes = list(convert_times(message))
    if not outcomes:
        print("No times found.")
        return
    for outcome in outcomes:
        if outcome.ok:
            print(format_time_table(outcome.instant, outcome.raw))
        else:
            print(format_failure(outcome.raw))
        print()


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="holobot")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Connect and start handling events")
    time_parser = subparsers.add_parser("time", help="Convert the times mentioned in a message")
    time_parser.add_argument("message", help='Text such as "Meeting at 2:30pm EST"')

    args = parser.parse_args(argv)
    if args.command == "time":
        _print_times(args.message)
        return
    _run()


if __name__ == "__main__":
    main()
