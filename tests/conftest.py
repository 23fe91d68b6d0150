"""Shared fixtures for holobot tests."""

from __future__ import annotations

import pytest

from core.config import BotConfig
from core.messenger import Messenger
from fakes import FakeChatClient, make_config


@pytest.fixture
def chat() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def config() -> BotConfig:
    return make_config()


@pytest.fixture
def messenger(chat: FakeChatClient, config: BotConfig) -> Messenger:
    return Messenger(chat, config)


@pytest.fixture
def debug_messenger(chat: FakeChatClient) -> Messenger:
    return Messenger(chat, make_config(debugging=True))
