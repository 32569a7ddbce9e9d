"""Typed client for the Miro REST API v2.

Reference: https://developers.miro.com/reference/api-reference

One ``MiroClient`` is built per inbound request and bound to that request's
credentials. Each method performs exactly one HTTP request (list helpers for a
single item kind are projections over ``list_items``) and never retries.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .config import ServerConfig
from .credentials import ACCESS_TOKEN_HEADER, TenantCredentials
from .errors import AuthenticationError, MiroApiError, RateLimitError, RequestTimeoutError
from .models import ItemType, Page

logger = logging.getLogger("miro-mcp.client")

DEFAULT_RETRY_AFTER = 60


def _parse_retry_after(value: Optional[str]) -> int:
    if not value:
        return DEFAULT_RETRY_AFTER
    try:
        return int(value.strip())
    except ValueError:
        return DEFAULT_RETRY_AFTER


def _error_message(response: httpx.Response) -> str:
    """Best-effort message from a JSON error body."""
    default = f"Miro API error: {response.status_code}"
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        return body.get("message") or body.get("error") or default
    return default


def _query(**params: Any) -> Dict[str, Any]:
    """Drop unset query parameters."""
    return {k: v for k, v in params.items() if v is not None}


class MiroClient:
    """Async Miro API client scoped to one tenant's credentials."""

    def __init__(
        self,
        credentials: TenantCredentials,
        config: Optional[ServerConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._credentials = credentials
        self._config = config or ServerConfig()
        self._transport = transport

    # ─── HTTP ────────────────────────────────────────────────────────────────

    def _get_headers(self) -> Dict[str, str]:
        """Return authorization headers, failing before any I/O without a token."""
        if not self._credentials.access_token:
            raise AuthenticationError(f"No access token provided. Include {ACCESS_TOKEN_HEADER} header.")
        return {
            "Authorization": f"Bearer {self._credentials.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        headers = self._get_headers()
        logger.debug("%s %s", method, path)
        try:
            async with httpx.AsyncClient(
                base_url=self._config.api_base_url,
                timeout=self._config.request_timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, headers=headers, params=params, json=json)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"Request timed out after {self._config.request_timeout:g}s: {method} {path}"
            ) from e

        status = response.status_code
        if status == 429:
            retry_after = _parse_retry_after(response.headers.get("Retry-After"))
            logger.warning("Rate limited on %s %s, retry after %ss", method, path, retry_after)
            raise RateLimitError("Rate limit exceeded", retry_after=retry_after)
        if status in (401, 403):
            logger.warning("Authentication failed on %s %s (%s)", method, path, status)
            raise AuthenticationError("Authentication failed. Check your Miro access token.", status_code=status)
        if not response.is_success:
            message = _error_message(response)
            logger.warning("Miro API error on %s %s: %s %s", method, path, status, message)
            raise MiroApiError(message, status_code=status)
        if status == 204 or not response.content:
            return None
        return response.json()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("GET", path, params=params)

    async def _post(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("POST", path, json=data)

    async def _put(self, path: str, data: Optional[Dict[str, Any]] = None) -> Any:
        return await self._request("PUT", path, json=data)

    async def _patch(self, path: str, data: Dict[str, Any]) -> Any:
        return await self._request("PATCH", path, json=data)

    async def _delete(self, path: str) -> None:
        await self._request("DELETE", path)

    async def _list(self, path: str, limit: Optional[int], cursor: Optional[str], **filters: Any) -> Page:
        params = _query(limit=self._config.page_size(limit), cursor=cursor, **filters)
        return Page.model_validate(await self._get(path, params=params) or {})

    # ─── Connection ──────────────────────────────────────────────────────────

    async def get_current_user(self) -> Dict[str, Any]:
        return await self._get("/users/me") or {}

    async def test_connection(self) -> Dict[str, Any]:
        """Check that the token works. Reports failure instead of raising."""
        try:
            user = await self.get_current_user()
        except (MiroApiError, httpx.HTTPError) as e:
            return {"connected": False, "message": str(e) or "Connection failed"}
        return {"connected": True, "message": f"Connected as {user.get('name', 'unknown user')}", "user": user}

    # ─── Boards ──────────────────────────────────────────────────────────────

    async def list_boards(
        self,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        team_id: Optional[str] = None,
        query: Optional[str] = None,
        sort: Optional[str] = None,
    ) -> Page:
        return await self._list("/boards", limit, cursor, team_id=team_id, query=query, sort=sort)

    async def get_board(self, board_id: str) -> Dict[str, Any]:
        return await self._get(f"/boards/{board_id}")

    async def create_board(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._post("/boards", data)

    async def update_board(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._patch(f"/boards/{board_id}", data)

    async def delete_board(self, board_id: str) -> None:
        await self._delete(f"/boards/{board_id}")

    async def copy_board(self, board_id: str, name: Optional[str] = None, team_id: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if name:
            body["name"] = name
        if team_id:
            body["team_id"] = team_id
        return await self._put(f"/boards/{board_id}/copy", body)

    # ─── Board Members ───────────────────────────────────────────────────────

    async def list_board_members(self, board_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Page:
        return await self._list(f"/boards/{board_id}/members", limit, cursor)

    async def get_board_member(self, board_id: str, member_id: str) -> Dict[str, Any]:
        return await self._get(f"/boards/{board_id}/members/{member_id}")

    async def share_board(
        self, board_id: str, emails: List[str], role: str = "viewer", message: Optional[str] = None
    ) -> Any:
        body: Dict[str, Any] = {"emails": emails, "role": role or "viewer"}
        if message:
            body["message"] = message
        return await self._post(f"/boards/{board_id}/members", body)

    async def update_board_member(self, board_id: str, member_id: str, role: str) -> Dict[str, Any]:
        return await self._patch(f"/boards/{board_id}/members/{member_id}", {"role": role})

    async def remove_board_member(self, board_id: str, member_id: str) -> None:
        await self._delete(f"/boards/{board_id}/members/{member_id}")

    # ─── Generic Items ───────────────────────────────────────────────────────

    async def list_items(
        self,
        board_id: str,
        limit: Optional[int] = None,
        cursor: Optional[str] = None,
        item_type: Optional[str] = None,
    ) -> Page:
        if isinstance(item_type, ItemType):
            item_type = item_type.value
        return await self._list(f"/boards/{board_id}/items", limit, cursor, type=item_type)

    async def get_item(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get(f"/boards/{board_id}/items/{item_id}")

    async def update_item_position(
        self, board_id: str, item_id: str, x: float, y: float, parent_id: Optional[str] = None
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"position": {"x": x, "y": y}}
        if parent_id:
            body["parent"] = {"id": parent_id}
        return await self._patch(f"/boards/{board_id}/items/{item_id}", body)

    async def delete_item(self, board_id: str, item_id: str) -> None:
        await self._delete(f"/boards/{board_id}/items/{item_id}")

    async def list_sticky_notes(self, board_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Page:
        return await self.list_items(board_id, limit, cursor, ItemType.STICKY_NOTE)

    async def list_shapes(self, board_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Page:
        return await self.list_items(board_id, limit, cursor, ItemType.SHAPE)

    async def list_texts(self, board_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Page:
        return await self.list_items(board_id, limit, cursor, ItemType.TEXT)

    async def list_cards(self, board_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Page:
        return await self.list_items(board_id, limit, cursor, ItemType.CARD)

    async def list_frames(self, board_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Page:
        return await self.list_items(board_id, limit, cursor, ItemType.FRAME)

    # ─── Board Widgets ───────────────────────────────────────────────────────
    # Sticky notes, shapes, texts, cards, images, frames, embeds, app cards and
    # documents share one REST shape: /boards/{board}/{collection}/{item}.

    async def _get_widget(self, collection: str, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get(f"/boards/{board_id}/{collection}/{item_id}")

    async def _create_widget(self, collection: str, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._post(f"/boards/{board_id}/{collection}", data)

    async def _update_widget(self, collection: str, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._patch(f"/boards/{board_id}/{collection}/{item_id}", data)

    async def _delete_widget(self, collection: str, board_id: str, item_id: str) -> None:
        await self._delete(f"/boards/{board_id}/{collection}/{item_id}")

    async def get_sticky_note(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("sticky_notes", board_id, item_id)

    async def create_sticky_note(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("sticky_notes", board_id, data)

    async def update_sticky_note(self, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update_widget("sticky_notes", board_id, item_id, data)

    async def delete_sticky_note(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("sticky_notes", board_id, item_id)

    async def get_shape(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("shapes", board_id, item_id)

    async def create_shape(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("shapes", board_id, data)

    async def update_shape(self, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update_widget("shapes", board_id, item_id, data)

    async def delete_shape(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("shapes", board_id, item_id)

    async def get_text(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("texts", board_id, item_id)

    async def create_text(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("texts", board_id, data)

    async def update_text(self, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update_widget("texts", board_id, item_id, data)

    async def delete_text(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("texts", board_id, item_id)

    async def get_card(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("cards", board_id, item_id)

    async def create_card(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("cards", board_id, data)

    async def update_card(self, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update_widget("cards", board_id, item_id, data)

    async def delete_card(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("cards", board_id, item_id)

    async def get_image(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("images", board_id, item_id)

    async def create_image_from_url(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("images", board_id, data)

    async def update_image(self, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update_widget("images", board_id, item_id, data)

    async def delete_image(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("images", board_id, item_id)

    async def get_frame(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("frames", board_id, item_id)

    async def create_frame(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("frames", board_id, data)

    async def update_frame(self, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update_widget("frames", board_id, item_id, data)

    async def delete_frame(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("frames", board_id, item_id)

    async def get_frame_items(
        self, board_id: str, frame_id: str, limit: Optional[int] = None, cursor: Optional[str] = None
    ) -> Page:
        return await self._list(f"/boards/{board_id}/frames/{frame_id}/items", limit, cursor)

    async def get_embed(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("embeds", board_id, item_id)

    async def create_embed(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("embeds", board_id, data)

    async def update_embed(self, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update_widget("embeds", board_id, item_id, data)

    async def delete_embed(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("embeds", board_id, item_id)

    async def get_app_card(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("app_cards", board_id, item_id)

    async def create_app_card(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("app_cards", board_id, data)

    async def update_app_card(self, board_id: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._update_widget("app_cards", board_id, item_id, data)

    async def delete_app_card(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("app_cards", board_id, item_id)

    async def get_document(self, board_id: str, item_id: str) -> Dict[str, Any]:
        return await self._get_widget("documents", board_id, item_id)

    async def create_document_from_url(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._create_widget("documents", board_id, data)

    async def delete_document(self, board_id: str, item_id: str) -> None:
        await self._delete_widget("documents", board_id, item_id)

    # ─── Connectors ──────────────────────────────────────────────────────────

    async def list_connectors(self, board_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Page:
        return await self._list(f"/boards/{board_id}/connectors", limit, cursor)

    async def get_connector(self, board_id: str, connector_id: str) -> Dict[str, Any]:
        return await self._get(f"/boards/{board_id}/connectors/{connector_id}")

    async def create_connector(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._post(f"/boards/{board_id}/connectors", data)

    async def update_connector(self, board_id: str, connector_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._patch(f"/boards/{board_id}/connectors/{connector_id}", data)

    async def delete_connector(self, board_id: str, connector_id: str) -> None:
        await self._delete(f"/boards/{board_id}/connectors/{connector_id}")

    # ─── Tags ────────────────────────────────────────────────────────────────

    async def list_tags(self, board_id: str, limit: Optional[int] = None, cursor: Optional[str] = None) -> Page:
        return await self._list(f"/boards/{board_id}/tags", limit, cursor)

    async def get_tag(self, board_id: str, tag_id: str) -> Dict[str, Any]:
        return await self._get(f"/boards/{board_id}/tags/{tag_id}")

    async def create_tag(self, board_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._post(f"/boards/{board_id}/tags", data)

    async def update_tag(self, board_id: str, tag_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._patch(f"/boards/{board_id}/tags/{tag_id}", data)

    async def delete_tag(self, board_id: str, tag_id: str) -> None:
        await self._delete(f"/boards/{board_id}/tags/{tag_id}")

    async def attach_tag_to_item(self, board_id: str, item_id: str, tag_id: str) -> None:
        await self._post(f"/boards/{board_id}/items/{item_id}/tags/{tag_id}")

    async def remove_tag_from_item(self, board_id: str, item_id: str, tag_id: str) -> None:
        await self._delete(f"/boards/{board_id}/items/{item_id}/tags/{tag_id}")

    async def get_items_by_tag(
        self, board_id: str, tag_id: str, limit: Optional[int] = None, cursor: Optional[str] = None
    ) -> Page:
        return await self._list(f"/boards/{board_id}/tags/{tag_id}/items", limit, cursor)

    async def get_tags_from_item(self, board_id: str, item_id: str) -> List[Dict[str, Any]]:
        response = await self._get(f"/boards/{board_id}/items/{item_id}/tags")
        return (response or {}).get("data", [])
