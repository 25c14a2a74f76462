"""Users as seen by the signed-in account and by administrators."""

from __future__ import annotations

import json
from typing import Any

from .models import PageUsers, StatusMessage, User
from .transport import BaseClient, GrafanaError


def _decode(raw: bytes, what: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        text = raw.decode("utf-8", errors="replace")
        raise GrafanaError(f"unmarshal {what}: {exc}\n{text}") from exc


def _object(data: Any, what: str) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise GrafanaError(f"unmarshal {what}: expected a JSON object")
    return data


def _user(data: Any) -> User:
    try:
        return User.from_dict(_object(data, "user"))
    except TypeError as exc:
        raise GrafanaError(f"unmarshal user: {exc}") from exc


class UserAPI(BaseClient):
    """Operations on users."""

    def get_actual_user(self) -> User:
        """Get the signed-in user."""
        raw, status = self._get("api/user")
        self._ensure_ok(status, raw)
        return _user(_decode(raw, "user"))

    def get_user(self, user_id: int) -> User:
        """Get a user by id."""
        raw, status = self._get(f"api/users/{user_id}")
        self._ensure_ok(status, raw)
        return _user(_decode(raw, "user"))

    def get_all_users(self) -> list[User]:
        """List all users."""
        raw, status = self._get("api/users", {"perpage": "99999"})
        self._ensure_ok(status, raw)
        data = _decode(raw, "users")
        if data is None:
            return []
        if not isinstance(data, list):
            raise GrafanaError("unmarshal users: expected a JSON array")
        return [_user(item) for item in data]

    def search_users_with_paging(
        self, query: str | None = None, perpage: int | None = None, page: int | None = None
    ) -> PageUsers:
        """Search users by name, login or e-mail, one page at a time.

        Paging is only sent when both ``perpage`` and ``page`` are given.
        """
        params: dict[str, str] | None = None
        if perpage is not None and page is not None:
            params = {"perpage": str(perpage), "page": str(page)}
        if query is not None:
            params = params if params is not None else {}
            params["query"] = query
        raw, status = self._get("api/users/search", params)
        self._ensure_ok(status, raw)
        data = _object(_decode(raw, "users"), "users")
        try:
            return PageUsers.from_dict(data)
        except (TypeError, AttributeError) as exc:
            raise GrafanaError(f"unmarshal users: {exc}") from exc

    def switch_actual_user_context(self, org_id: int) -> StatusMessage:
        """Switch the signed-in user to the given organization."""
        raw, _ = self._post(f"/api/user/using/{org_id}")
        data = self._decode_json(raw)
        if data is None:
            return StatusMessage()
        if not isinstance(data, dict):
            raise GrafanaError("unexpected status message format")
        return StatusMessage.from_dict(data)