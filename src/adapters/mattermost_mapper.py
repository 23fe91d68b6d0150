"""Mattermost-to-core mapping adapter.

This keeps Mattermost JSON shapes out of the core. Websocket frames embed
posts and reactions as JSON strings; they are decoded here so handlers only
ever see core models.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Union

from core.models import Channel, Event, Post, Reaction, Team, User

LOGGER = logging.getLogger(__name__)

RawDocument = Union[str, bytes, Mapping[str, Any]]


def _as_mapping(raw: RawDocument) -> Mapping[str, Any]:
    if isinstance(raw, (str, bytes)):
        raw = json.loads(raw)
    if not isinstance(raw, Mapping):
        raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
    return raw


def post_from_json(raw: RawDocument) -> Post:
    doc = _as_mapping(raw)
    return Post(
        id=doc["id"],
        channel_id=doc.get("channel_id", ""),
        user_id=doc.get("user_id", ""),
        message=doc.get("message", ""),
        root_id=doc.get("root_id") or "",
    )


def reaction_from_json(raw: RawDocument) -> Reaction:
    doc = _as_mapping(raw)
    return Reaction(user_id=doc["user_id"], post_id=doc["post_id"], emoji_name=doc["emoji_name"])


def team_from_json(raw: RawDocument) -> Team:
    doc = _as_mapping(raw)
    return Team(id=doc["id"], name=doc.get("name", ""), display_name=doc.get("display_name", ""))


def channel_from_json(raw: RawDocument) -> Channel:
    doc = _as_mapping(raw)
    return Channel(
        id=doc["id"],
        name=doc.get("name", ""),
        team_id=doc.get("team_id", ""),
        display_name=doc.get("display_name", ""),
    )


def user_from_json(raw: RawDocument) -> User:
    doc = _as_mapping(raw)
    return User(
        id=doc["id"],
        username=doc.get("username", ""),
        first_name=doc.get("first_name", ""),
        last_name=doc.get("last_name", ""),
    )


_EMBEDDED_DECODERS = {
    "post": post_from_json,
    "reaction": reaction_from_json,
}


def build_event(frame: Mapping[str, Any]) -> Optional[Event]:
    """Build a core Event from a decoded websocket frame.

    Replies to our own websocket requests carry no ``event`` field and map
    to None.
    """

    kind = frame.get("event")
    if not kind:
        return None

    data = dict(frame.get("data") or {})
    for key, decoder in _EMBEDDED_DECODERS.items():
        if key not in data:
            continue
        try:
            data[key] = decoder(data[key])
        except (ValueError, TypeError, KeyError) as exc:
            # Keep the raw value; handlers treat undecodable payloads as absent.
            LOGGER.warning("Could not decode %s in %s event: %s", key, kind, exc)

    broadcast = frame.get("broadcast") or {}
    channel_id = broadcast.get("channel_id") or data.get("channel_id") or ""
    return Event(kind=kind, data=data, channel_id=channel_id)
