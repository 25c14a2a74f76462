"""Annotations and dashboard snapshots."""

from __future__ import annotations

import json
from typing import Any, Mapping

from .models import CreateSnapshotRequest, StatusMessage
from .params import QueryParam, build_query
from .transport import BaseClient, GrafanaError


def _marshal(payload: Any) -> bytes:
    try:
        return json.dumps(payload).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise GrafanaError(f"marshal request: {exc}") from exc


def _decode(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise GrafanaError(f"unmarshal response message: {exc}") from exc


def _reply(raw: bytes) -> StatusMessage:
    data = _decode(raw)
    if data is None:
        return StatusMessage()
    if not isinstance(data, dict):
        raise GrafanaError("unmarshal response message: expected a JSON object")
    return StatusMessage.from_dict(data)


class AnnotationAPI(BaseClient):
    """Operations on annotations and snapshots."""

    def create_annotation(self, request: Mapping[str, Any]) -> StatusMessage:
        """Create an annotation."""
        body = _marshal(dict(request))
        try:
            raw, _ = self._post("api/annotations", body)
        except GrafanaError as exc:
            raise GrafanaError(f"create annotation: {exc}") from exc
        return _reply(raw)

    def patch_annotation(
        self, annotation_id: int, request: Mapping[str, Any]
    ) -> StatusMessage:
        """Patch the annotation with the given id."""
        body = _marshal(dict(request))
        try:
            raw, _ = self._patch(f"api/annotations/{annotation_id}", body)
        except GrafanaError as exc:
            raise GrafanaError(f"patch annotation: {exc}") from exc
        return _reply(raw)

    def get_annotations(self, *params: QueryParam) -> list[dict[str, Any]]:
        """Find annotations matching the given filters."""
        try:
            raw, _ = self._get("api/annotations", build_query(*params))
        except GrafanaError as exc:
            raise GrafanaError(f"get annotations: {exc}") from exc
        data = _decode(raw)
        if data is None:
            return []
        if not isinstance(data, list):
            raise GrafanaError("unmarshal response message: expected a JSON array")
        return data

    def delete_annotation(self, annotation_id: int) -> StatusMessage:
        """Delete the annotation with the given id."""
        try:
            raw, _ = self._delete(f"api/annotations/{annotation_id}")
        except GrafanaError as exc:
            raise GrafanaError(f"delete annotation: {exc}") from exc
        return _reply(raw)

    def create_snapshot(
        self, request: CreateSnapshotRequest | Mapping[str, Any]
    ) -> StatusMessage:
        """Create a dashboard snapshot."""
        payload = (
            request.to_dict() if isinstance(request, CreateSnapshotRequest) else dict(request)
        )
        body = _marshal(payload)
        try:
            raw, status = self._post("api/snapshots", body)
        except GrafanaError as exc:
            raise GrafanaError(f"create snapshot: {exc}") from exc
        if status // 100 != 2:
            raise GrafanaError(f"bad response: {status}")
        return _reply(raw)