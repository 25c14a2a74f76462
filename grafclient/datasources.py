"""Datasource management."""

from __future__ import annotations

import json
from typing import Any, Mapping

from .models import StatusMessage
from .transport import BaseClient, GrafanaError


def _marshal(payload: Mapping[str, Any]) -> bytes:
    try:
        return json.dumps(dict(payload)).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise GrafanaError(f"cannot encode request: {exc}") from exc


def _object(data: Any) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise GrafanaError("unexpected response: expected a JSON object")
    return data


def _reply(data: Any) -> StatusMessage:
    return StatusMessage.from_dict(_object(data))


class DatasourceAPI(BaseClient):
    """Operations on datasources."""

    def get_all_datasources(self) -> list[dict[str, Any]]:
        """List all datasources."""
        raw, status = self._get("api/datasources")
        self._ensure_ok(status, raw)
        data = self._decode_json(raw)
        if data is None:
            return []
        if not isinstance(data, list):
            raise GrafanaError("unexpected response: expected a JSON array")
        return data

    def get_datasource(self, datasource_id: int) -> dict[str, Any]:
        """Get a datasource by id."""
        raw, status = self._get(f"api/datasources/{datasource_id}")
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))

    def get_datasource_by_name(self, name: str) -> dict[str, Any]:
        """Get a datasource by name."""
        raw, status = self._get(f"api/datasources/name/{name}")
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))

    def create_datasource(self, datasource: Mapping[str, Any]) -> StatusMessage:
        """Create a datasource."""
        raw, _ = self._post("api/datasources", _marshal(datasource))
        return _reply(self._decode_json(raw))

    def update_datasource(self, datasource: Mapping[str, Any]) -> StatusMessage:
        """Update the datasource identified by the ``id`` of the given data."""
        datasource_id = datasource.get("id") or 0
        raw, _ = self._put(f"api/datasources/{datasource_id}", _marshal(datasource))
        return _reply(self._decode_json(raw))

    def delete_datasource(self, datasource_id: int) -> StatusMessage:
        """Delete a datasource by id."""
        raw, _ = self._delete(f"api/datasources/{datasource_id}")
        return _reply(self._decode_json(raw))

    def delete_datasource_by_name(self, name: str) -> StatusMessage:
        """Delete a datasource by name."""
        raw, _ = self._delete(f"api/datasources/name/{name}")
        return _reply(self._decode_json(raw))

    def get_datasource_types(self) -> dict[str, dict[str, Any]]:
        """Map each available datasource plugin id to its description."""
        raw, status = self._get("api/datasources/plugins")
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))