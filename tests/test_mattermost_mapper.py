from __future__ import annotations

import json

from adapters.mattermost_mapper import build_event, channel_from_json, user_from_json
from core.models import EventKind


def test_posted_frame_decodes_embedded_post() -> None:
    post = {"id": "p1", "channel_id": "c1", "user_id": "u1", "message": "9am PT", "root_id": ""}
    frame = {
        "event": "posted",
        "data": {"post": json.dumps(post), "sender_name": "@alice", "channel_name": "town-square"},
        "broadcast": {"channel_id": "c1"},
    }

    event = build_event(frame)

    assert event.kind == EventKind.POSTED
    assert event.channel_id == "c1"
    assert event.post.message == "9am PT"
    assert event.post.thread_id == "p1"
    assert event.get_str("sender_name") == "@alice"


def test_reaction_frame_decodes_reaction() -> None:
    reaction = {"user_id": "u2", "post_id": "p1", "emoji_name": "x"}
    event = build_event({"event": "reaction_added", "data": {"reaction": json.dumps(reaction)}})

    assert event.reaction.emoji_name == "x"
    assert event.reaction.post_id == "p1"
    assert event.post is None


def test_reply_frames_map_to_none() -> None:
    assert build_event({"status": "OK", "seq_reply": 1}) is None


def test_undecodable_post_is_kept_raw() -> None:
    event = build_event({"event": "posted", "data": {"post": "{not json"}})

    assert event.data["post"] == "{not json"
    assert event.post is None


def test_channel_id_falls_back_to_data() -> None:
    event = build_event({"event": "channel_viewed", "data": {"channel_id": "c9"}, "broadcast": {}})
    assert event.channel_id == "c9"


def test_directory_documents() -> None:
    channel = channel_from_json({"id": "c1", "name": "general", "team_id": "t1"})
    user = user_from_json('{"id": "u1", "username": "alice"}')

    assert (channel.name, channel.team_id) == ("general", "t1")
    assert (user.username, user.first_name) == ("alice", "")
