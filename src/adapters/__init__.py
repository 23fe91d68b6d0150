"""Mattermost adapters: REST client, websocket transport and JSON mapping."""
