"""Organizations, their members, preferences and addresses."""

from __future__ import annotations

import json
from typing import Any, Mapping

from .models import StatusMessage, UserRole
from .transport import BaseClient, GrafanaError


def _payload(value: UserRole | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(value, UserRole):
        return value.to_dict()
    return dict(value)


def _marshal(payload: Any) -> bytes:
    try:
        return json.dumps(payload).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise GrafanaError(f"cannot encode request: {exc}") from exc


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


def _array(data: Any, what: str) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise GrafanaError(f"unmarshal {what}: expected a JSON array")
    return data


class OrgAPI(BaseClient):
    """Operations on organizations."""

    def _status(self, raw: bytes) -> StatusMessage:
        data = self._decode_json(raw)
        if data is None:
            return StatusMessage()
        if not isinstance(data, dict):
            raise GrafanaError("unexpected status message format")
        return StatusMessage.from_dict(data)

    def _fetch(self, path: str, what: str) -> Any:
        raw, status = self._get(path)
        self._ensure_ok(status, raw)
        return _decode(raw, what)

    def create_org(self, org: Mapping[str, Any]) -> StatusMessage:
        """Create an organization."""
        raw, _ = self._post("api/orgs", _marshal(dict(org)))
        return self._status(raw)

    def get_all_orgs(self) -> list[dict[str, Any]]:
        """List all organizations."""
        return _array(self._fetch("api/orgs", "orgs"), "orgs")

    def get_actual_org(self) -> dict[str, Any]:
        """Get the current organization."""
        return _object(self._fetch("api/org", "org"), "org")

    def get_org_by_id(self, org_id: int) -> dict[str, Any]:
        """Get an organization by id."""
        return _object(self._fetch(f"api/orgs/{org_id}", "org"), "org")

    def get_org_by_org_name(self, name: str) -> dict[str, Any]:
        """Get an organization by name."""
        return _object(self._fetch(f"api/orgs/name/{name}", "org"), "org")

    def update_actual_org(self, org: Mapping[str, Any]) -> StatusMessage:
        """Update the current organization."""
        raw, _ = self._put("api/org", _marshal(dict(org)))
        return self._status(raw)

    def update_org(self, org: Mapping[str, Any], org_id: int) -> StatusMessage:
        """Update the organization with the given id."""
        raw, _ = self._put(f"api/orgs/{org_id}", _marshal(dict(org)))
        return self._status(raw)

    def delete_org(self, org_id: int) -> StatusMessage:
        """Delete the organization with the given id."""
        raw, _ = self._delete(f"api/orgs/{org_id}")
        return self._status(raw)

    def get_actual_org_users(self) -> list[dict[str, Any]]:
        """List the users of the current organization."""
        return _array(self._fetch("api/org/users", "org"), "org")

    def get_org_users(self, org_id: int) -> list[dict[str, Any]]:
        """List the users of the organization with the given id."""
        return _array(self._fetch(f"api/orgs/{org_id}/users", "org"), "org")

    def add_actual_org_user(self, user_role: UserRole | Mapping[str, Any]) -> StatusMessage:
        """Add a global user to the current organization."""
        raw, _ = self._post("api/org/users", _marshal(_payload(user_role)))
        return self._status(raw)

    def update_actual_org_user(
        self, user_role: UserRole | Mapping[str, Any], user_id: int
    ) -> StatusMessage:
        """Update a user's role in the current organization."""
        raw, _ = self._post(f"api/org/users/{user_id}", _marshal(_payload(user_role)))
        return self._status(raw)

    def delete_actual_org_user(self, user_id: int) -> StatusMessage:
        """Remove a user from the current organization."""
        raw, _ = self._delete(f"api/org/users/{user_id}")
        return self._status(raw)

    def add_org_user(
        self, user_role: UserRole | Mapping[str, Any], org_id: int
    ) -> StatusMessage:
        """Add a user to the organization with the given id."""
        raw, _ = self._post(f"api/orgs/{org_id}/users", _marshal(_payload(user_role)))
        return self._status(raw)

    def update_org_user(
        self, user_role: UserRole | Mapping[str, Any], org_id: int, user_id: int
    ) -> StatusMessage:
        """Update a user's role within the organization with the given id."""
        raw, _ = self._patch(
            f"api/orgs/{org_id}/users/{user_id}", _marshal(_payload(user_role))
        )
        return self._status(raw)

    def delete_org_user(self, org_id: int, user_id: int) -> StatusMessage:
        """Remove a user from the organization with the given id."""
        raw, _ = self._delete(f"api/orgs/{org_id}/users/{user_id}")
        return self._status(raw)

    def update_actual_org_preferences(self, prefs: Mapping[str, Any]) -> StatusMessage:
        """Update the preferences of the current organization."""
        raw, _ = self._put("api/org/preferences/", _marshal(dict(prefs)))
        return self._status(raw)

    def get_actual_org_preferences(self) -> dict[str, Any]:
        """Get the preferences of the current organization."""
        return _object(self._fetch("/api/org/preferences", "prefs"), "prefs")

    def update_actual_org_address(self, address: Mapping[str, Any]) -> StatusMessage:
        """Update the address of the current organization."""
        raw, _ = self._put("api/org/address", _marshal(dict(address)))
        return self._status(raw)

    def update_org_address(self, address: Mapping[str, Any], org_id: int) -> StatusMessage:
        """Update the address of the organization with the given id."""
        raw, _ = self._put(f"api/orgs/{org_id}/address", _marshal(dict(address)))
        return self._status(raw)