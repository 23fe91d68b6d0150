"""Mattermost client factory for holobot.

Credentials come from the environment so they never land in config.json.
"""

from __future__ import annotations

import logging
import os

from dotenv import load_dotenv

from adapters.mattermost_client import MattermostClient
from core.models import User


async def build_client(base_url: str) -> tuple[MattermostClient, User]:
    """Create an authenticated client and return it with the bot's user.

    HOLOBOT_TOKEN (a personal access token) is preferred; otherwise
    HOLOBOT_EMAIL and HOLOBOT_PASSWORD are used to log in.
    """

    load_dotenv()

    token = os.getenv("HOLOBOT_TOKEN")
    email = os.getenv("HOLOBOT_EMAIL")
    password = os.getenv("HOLOBOT_PASSWORD")

    # Fail fast on missing credentials to avoid an ambiguous login error.
    if not token and not (email and password):
        raise RuntimeError("Set HOLOBOT_TOKEN, or HOLOBOT_EMAIL and HOLOBOT_PASSWORD, in the environment")

    logging.getLogger(__name__).info("Initializing Mattermost client for %s", base_url)

    client = MattermostClient(base_url, token=token)
    if token:
        return client, await client.get_me()
    return client, await client.login(email, password)
