"""Folders and their permissions."""

from __future__ import annotations

import json
from typing import Any, Mapping

from .models import StatusMessage
from .params import QueryParam, build_query
from .transport import BaseClient, GrafanaError


def _marshal(payload: Any) -> bytes:
    try:
        return json.dumps(payload).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise GrafanaError(f"cannot encode request: {exc}") from exc


def _object(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise GrafanaError("unexpected response: expected a JSON object")
    return data


def _array(data: Any) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise GrafanaError("unexpected response: expected a JSON array")
    return data


class FolderAPI(BaseClient):
    """Operations on folders."""

    def get_all_folders(self, *params: QueryParam) -> list[dict[str, Any]]:
        """List folders."""
        raw, status = self._get("api/folders", build_query(*params))
        self._ensure_ok(status, raw)
        return _array(self._decode_json(raw))

    def get_folder_by_uid(self, uid: str) -> dict[str, Any]:
        """Get a folder by uid."""
        raw, status = self._get(f"api/folders/{uid}")
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))

    def create_folder(self, folder: Mapping[str, Any]) -> dict[str, Any]:
        """Create a folder and return it as stored."""
        raw, status = self._post("api/folders", _marshal(dict(folder)))
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))

    def update_folder_by_uid(self, folder: Mapping[str, Any]) -> dict[str, Any]:
        """Update the folder identified by the ``uid`` of the given data."""
        uid = folder.get("uid") or ""
        raw, status = self._put(f"api/folders/{uid}", _marshal(dict(folder)))
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))

    def delete_folder_by_uid(self, uid: str) -> bool:
        """Delete a folder by uid."""
        raw, status = self._delete(f"api/folders/{uid}")
        self._ensure_ok(status, raw)
        return True

    def get_folder_by_id(self, folder_id: int) -> dict[str, Any]:
        """Get a folder by its numeric id, which must be positive."""
        if folder_id <= 0:
            raise ValueError("ID cannot be less than zero")
        raw, status = self._get(f"api/folders/id/{folder_id}")
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))

    def get_folder_permissions(self, folder_uid: str) -> list[dict[str, Any]]:
        """List the permissions of a folder."""
        raw, status = self._get(f"api/folders/{folder_uid}/permissions")
        self._ensure_ok(status, raw)
        return _array(self._decode_json(raw))

    def update_folder_permissions(
        self, folder_uid: str, *permissions: Mapping[str, Any]
    ) -> StatusMessage:
        """Replace the permissions of a folder with the given ones."""
        body = _marshal({"items": [dict(item) for item in permissions]})
        raw, status = self._post(f"api/folders/{folder_uid}/permissions", body)
        self._ensure_ok(status, raw)
        return StatusMessage.from_dict(_object(self._decode_json(raw)))