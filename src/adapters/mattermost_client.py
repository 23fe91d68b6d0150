"""Mattermost REST adapter.

Implements the core DirectoryPort and MessagePort on top of the v4 REST API
with a single shared aiohttp session. aiohttp sessions are safe to use
concurrently from tasks on the same event loop, which the reconciler relies
on.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import aiohttp

from adapters.mattermost_mapper import (
    channel_from_json,
    post_from_json,
    team_from_json,
    user_from_json,
)
from core.errors import ChatClientError
from core.models import Channel, Post, Reaction, Team, User

LOGGER = logging.getLogger(__name__)

USERS_PAGE_SIZE = 200


class MattermostAPIError(ChatClientError):
    """A non-2xx answer from the server, with its error details."""

    def __init__(self, status: int, message: str, error_id: str = "", detailed_error: str = "") -> None:
        super().__init__(f"{status} {error_id}: {message}".strip())
        self.status = status
        self.message = message
        self.error_id = error_id
        self.detailed_error = detailed_error


class MattermostClient:
    """Thin async client for the handful of endpoints the bot uses."""

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 30.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def token(self) -> Optional[str]:
        return self._token

    def _endpoint(self, path: str) -> str:
        return f"{self._base_url}/api/v4{path}"

    def _http(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()

    async def _request(self, method: str, path: str, *, json: Any = None, params: Any = None) -> aiohttp.ClientResponse:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        try:
            response = await self._http().request(
                method, self._endpoint(path), json=json, params=params, headers=headers
            )
        except (aiohttp.ClientError, OSError) as exc:
            raise ChatClientError(f"{method} {path} failed: {exc}") from exc
        if response.status >= 400:
            await self._raise_for_status(response)
        return response

    async def _raise_for_status(self, response: aiohttp.ClientResponse) -> None:
        try:
            body = await response.json(content_type=None)
        except ValueError:
            body = None
        finally:
            response.release()
        if not isinstance(body, dict):
            body = {}
        raise MattermostAPIError(
            status=response.status,
            message=body.get("message", response.reason or ""),
            error_id=body.get("id", ""),
            detailed_error=body.get("detailed_error", ""),
        )

    async def _call(self, method: str, path: str, *, json: Any = None, params: Any = None) -> Any:
        response = await self._request(method, path, json=json, params=params)
        async with response:
            if response.status == 204:
                return None
            try:
                return await response.json(content_type=None)
            except ValueError as exc:
                raise ChatClientError(f"{method} {path} returned invalid JSON") from exc

    # Session ----------------------------------------------------------------

    async def ping(self) -> dict:
        return await self._call("GET", "/system/ping")

    async def login(self, login_id: str, password: str) -> User:
        """Log in with credentials and keep the session token for later calls."""

        response = await self._request("POST", "/users/login", json={"login_id": login_id, "password": password})
        async with response:
            self._token = response.headers.get("Token")
            body = await response.json(content_type=None)
        if not self._token:
            raise ChatClientError("Login succeeded but no session token was returned")
        return user_from_json(body)

    async def get_me(self) -> User:
        return user_from_json(await self._call("GET", "/users/me"))

    async def patch_user(self, user_id: str, **fields: str) -> User:
        return user_from_json(await self._call("PUT", f"/users/{user_id}/patch", json=fields))

    # Directory --------------------------------------------------------------

    async def get_team_by_name(self, name: str) -> Team:
        return team_from_json(await self._call("GET", f"/teams/name/{name}"))

    async def get_channel_by_name(self, name: str, team_id: str) -> Channel:
        return channel_from_json(await self._call("GET", f"/teams/{team_id}/channels/name/{name}"))

    async def create_channel(self, team_id: str, name: str, display_name: str, purpose: str = "") -> Channel:
        payload = {
            "team_id": team_id,
            "name": name,
            "display_name": display_name,
            "purpose": purpose,
            "type": "O",
        }
        return channel_from_json(await self._call("POST", "/channels", json=payload))

    async def get_teams_for_user(self, user_id: str) -> List[Team]:
        return [team_from_json(item) for item in await self._call("GET", f"/users/{user_id}/teams") or []]

    async def add_channel_member(self, channel_id: str, user_id: str) -> None:
        await self._call("POST", f"/channels/{channel_id}/members", json={"user_id": user_id})

    async def get_users_in_team(self, team_id: str) -> List[User]:
        params = {"in_team": team_id, "page": 0, "per_page": USERS_PAGE_SIZE}
        return [user_from_json(item) for item in await self._call("GET", "/users", params=params) or []]

    async def get_post(self, post_id: str) -> Post:
        return post_from_json(await self._call("GET", f"/posts/{post_id}"))

    async def get_user(self, user_id: str) -> User:
        return user_from_json(await self._call("GET", f"/users/{user_id}"))

    async def get_channel(self, channel_id: str) -> Channel:
        return channel_from_json(await self._call("GET", f"/channels/{channel_id}"))

    async def get_team(self, team_id: str) -> Team:
        return team_from_json(await self._call("GET", f"/teams/{team_id}"))

    # Messages ---------------------------------------------------------------

    async def create_post(self, channel_id: str, message: str, root_id: str = "") -> Post:
        payload = {"channel_id": channel_id, "message": message, "root_id": root_id}
        return post_from_json(await self._call("POST", "/posts", json=payload))

    async def create_direct_channel(self, user_id: str, other_user_id: str) -> Channel:
        return channel_from_json(await self._call("POST", "/channels/direct", json=[user_id, other_user_id]))

    async def delete_post(self, post_id: str) -> None:
        await self._call("DELETE", f"/posts/{post_id}")

    async def delete_reaction(self, reaction: Reaction) -> None:
        await self._call(
            "DELETE",
            f"/users/{reaction.user_id}/posts/{reaction.post_id}/reactions/{reaction.emoji_name}",
        )
