"""Static configuration for holobot.

All user-editable settings (server, bot identity, teams, channels, logging)
live in a single JSON file. Secrets stay in the environment (see client.py).
"""

import json
import os

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

# HOLOBOT_CONFIG points at an alternative config file.
CONFIG_PATH = os.getenv("HOLOBOT_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")


def _load_json_config() -> dict:
    """Load config.json with a flat, user-friendly schema."""

    if not os.path.exists(CONFIG_PATH):
        raise FileNotFoundError(f"Config file not found: {CONFIG_PATH}")

    with open(CONFIG_PATH, "r", encoding="utf-8") as handle:
        return json.load(handle)


_CONFIG = _load_json_config()

# Expose the raw config for modules that need structured access.
CONFIG = _CONFIG

# Server address. The scheme only changes for local test servers.
_server = _CONFIG.get("mattermost", {})
DOMAIN = _server["domain"]
SCHEME = _server.get("scheme", "https")
BASE_URL = f"{SCHEME}://{DOMAIN}"

# Bot identity; the profile is updated on startup when it drifts.
_bot = _CONFIG.get("bot", {})
BOT_USERNAME = _bot.get("username", "holobot")
LONG_NAME = _bot.get("long_name", BOT_USERNAME)
BOT_FIRST_NAME = _bot.get("first_name", "")
BOT_LAST_NAME = _bot.get("last_name", "")

# Team names are resolved to ids at startup.
_teams = _CONFIG.get("teams", {})
PUBLIC_TEAM_NAME = _teams["public"]
PRIVATE_TEAM_NAME = _teams.get("private", PUBLIC_TEAM_NAME)
DEBUGGING_TEAM_NAME = _teams.get("debugging", PUBLIC_TEAM_NAME)

_channels = _CONFIG.get("channels", {})
ANNOUNCEMENTS_CHANNEL = _channels.get("announcements", "announcements")
LOG_CHANNEL = _channels.get("log", "holobot-debugging")

# Debugging enables extra actions and echoes into LOG_CHANNEL.
DEBUGGING = bool(_CONFIG.get("debugging", False))

# Welcome reconciler polling: every interval_seconds, up to max_attempts times.
_reconciler = _CONFIG.get("reconciler", {})
RECONCILER_INTERVAL_SECONDS = float(_reconciler.get("interval_seconds", 5))
RECONCILER_MAX_ATTEMPTS = int(_reconciler.get("max_attempts", 360))

# Logging configuration (optional).
LOGGING = _CONFIG.get("logging", {})
