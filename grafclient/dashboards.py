"""Dashboard search, retrieval, storage and removal."""

from __future__ import annotations

import json
import re
from typing import Any, Mapping

from .models import (
    DEFAULT_FOLDER_ID,
    BoardProperties,
    DashboardVersion,
    FoundBoard,
    RawBoardRequest,
    SetDashboardParams,
    StatusMessage,
)
from .params import (
    QueryParam,
    SearchParamType,
    build_query,
    search_query,
    search_starred,
    search_tag,
    search_type,
)
from .transport import BaseClient, GrafanaError, HTTPStatusError

_WHITESPACE = re.compile(r"[ \t\n\r]*")


def set_prefix(slug: str) -> str:
    """Add the ``db/`` prefix unless the slug already names a database or file dashboard."""
    if slug.startswith("db") or slug.startswith("file/"):
        return slug
    return f"db/{slug}"


def clean_prefix(slug: str) -> tuple[str, bool]:
    """Strip the source prefix and tell whether the dashboard lives in the database."""
    if slug.startswith("db"):
        return slug[3:], True
    if slug.startswith("file"):
        return slug[3:], False
    return slug, True


def _raw_members(text: str) -> dict[str, str]:
    """Split a JSON object into its members, keeping each value's text untouched."""
    decoder = json.JSONDecoder()
    pos = _WHITESPACE.match(text, 0).end()
    if text[pos : pos + 1] != "{":
        raise GrafanaError("unmarshal board: expected a JSON object")
    pos = _WHITESPACE.match(text, pos + 1).end()
    members: dict[str, str] = {}
    if text[pos : pos + 1] == "}":
        return members
    try:
        while True:
            key, pos = decoder.raw_decode(text, pos)
            if not isinstance(key, str):
                raise GrafanaError("unmarshal board: object key must be a string")
            pos = _WHITESPACE.match(text, pos).end()
            if text[pos : pos + 1] != ":":
                raise GrafanaError("unmarshal board: expected ':'")
            start = _WHITESPACE.match(text, pos + 1).end()
            _, pos = decoder.raw_decode(text, start)
            members[key] = text[start:pos]
            pos = _WHITESPACE.match(text, pos).end()
            separator = text[pos : pos + 1]
            pos += 1
            if separator == "}":
                return members
            if separator != ",":
                raise GrafanaError("unmarshal board: expected ',' or '}'")
            pos = _WHITESPACE.match(text, pos).end()
    except ValueError as exc:
        raise GrafanaError(f"unmarshal board: {exc}") from exc


class DashboardAPI(BaseClient):
    """Operations on dashboards."""

    def _status_message(self, raw: bytes) -> StatusMessage:
        data = self._decode_json(raw)
        if data is None:
            return StatusMessage()
        if not isinstance(data, dict):
            raise GrafanaError("unexpected status message format")
        return StatusMessage.from_dict(data)

    def _get_raw_dashboard(self, path: str) -> tuple[bytes, BoardProperties]:
        raw, status = self._get(f"api/dashboards/{path}")
        self._ensure_ok(status, raw)
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise GrafanaError(f"unmarshal board: {exc}") from exc
        members = _raw_members(text)
        meta = json.loads(members["meta"]) if "meta" in members else None
        if meta is None:
            properties = BoardProperties()
        elif isinstance(meta, dict):
            try:
                properties = BoardProperties.from_dict(meta)
            except ValueError as exc:
                raise GrafanaError(f"unmarshal board: {exc}") from exc
        else:
            raise GrafanaError("unmarshal board: meta must be an object")
        return members.get("dashboard", "").encode("utf-8"), properties

    def _get_dashboard(self, path: str) -> tuple[dict[str, Any], BoardProperties]:
        raw, properties = self._get_raw_dashboard(path)
        if not raw:
            raise GrafanaError("unmarshal board: no dashboard in response")
        board = self._decode_json(raw)
        if board is None:
            board = {}
        if not isinstance(board, dict):
            raise GrafanaError("unmarshal board: dashboard must be an object")
        return board, properties

    def get_dashboard_by_uid(self, uid: str) -> tuple[dict[str, Any], BoardProperties]:
        """Load a dashboard and its metadata by uid."""
        return self._get_dashboard("uid/" + uid)

    def get_dashboard_by_slug(self, slug: str) -> tuple[dict[str, Any], BoardProperties]:
        """Load a dashboard and its metadata by slug (``db/`` is assumed by default)."""
        return self._get_dashboard(set_prefix(slug))

    def get_raw_dashboard_by_uid(self, uid: str) -> tuple[bytes, BoardProperties]:
        """Load a dashboard's JSON exactly as the server sent it, by uid."""
        return self._get_raw_dashboard("uid/" + uid)

    def get_raw_dashboard_by_slug(self, slug: str) -> tuple[bytes, BoardProperties]:
        """Load a dashboard's JSON exactly as the server sent it, by slug."""
        return self._get_raw_dashboard(set_prefix(slug))

    def get_dashboard_versions_by_dashboard_id(
        self, dashboard_id: int, *params: QueryParam
    ) -> list[DashboardVersion]:
        """List the stored versions of a dashboard."""
        raw, status = self._get(
            f"api/dashboards/id/{dashboard_id}/versions", build_query(*params)
        )
        self._ensure_ok(status, raw)
        data = self._decode_json(raw)
        if data is None:
            return []
        if not isinstance(data, list):
            raise GrafanaError("unexpected dashboard versions format")
        try:
            return [DashboardVersion.from_dict(item) for item in data]
        except ValueError as exc:
            raise GrafanaError(str(exc)) from exc

    def search_dashboards(self, query: str, starred: bool, *tags: str) -> list[FoundBoard]:
        """Search dashboards by title substring, starred state and tags."""
        params = [
            search_type(SearchParamType.DASHBOARD),
            search_query(query),
            search_starred(starred),
        ]
        params.extend(search_tag(tag) for tag in tags)
        return self.search(*params)

    def search(self, *params: QueryParam) -> list[FoundBoard]:
        """Search folders and dashboards."""
        raw, status = self._get("api/search", build_query(*params))
        self._ensure_ok(status, raw)
        data = self._decode_json(raw)
        if data is None:
            return []
        if not isinstance(data, list):
            raise GrafanaError("unexpected search result format")
        return [FoundBoard.from_dict(item) for item in data]

    def set_dashboard(
        self, board: Mapping[str, Any], params: SetDashboardParams | None = None
    ) -> StatusMessage:
        """Create or update a database dashboard.

        Without ``overwrite`` the dashboard id is cleared so a new one is created.
        """
        params = params if params is not None else SetDashboardParams()
        slug, from_database = clean_prefix(board.get("slug") or "")
        if not from_database:
            raise GrafanaError("only database dashboard (with 'db/' prefix in a slug) can be set")
        dashboard = dict(board)
        dashboard["slug"] = slug
        if not params.overwrite:
            dashboard["id"] = 0
        payload = {
            "dashboard": dashboard,
            "folderId": params.folder_id,
            "overwrite": params.overwrite,
        }
        raw, status = self._post("api/dashboards/db", payload)
        reply = self._status_message(raw)
        if status != 200:
            raise HTTPStatusError(status, reply.message or "")
        return reply

    def set_raw_dashboard_with_param(self, request: RawBoardRequest) -> StatusMessage:
        """Store a dashboard given as raw JSON with explicit parameters."""
        try:
            body = request.to_json()
        except ValueError as exc:
            raise GrafanaError(str(exc)) from exc
        raw, status = self._post("api/dashboards/db", body)
        reply = self._status_message(raw)
        if status != 200:
            raise HTTPStatusError(status, reply.message or "")
        return reply

    def set_raw_dashboard(self, raw: bytes | str) -> StatusMessage:
        """Store a raw JSON dashboard in the general folder, overwriting."""
        request = RawBoardRequest(
            dashboard=raw,
            parameters=SetDashboardParams(folder_id=DEFAULT_FOLDER_ID, overwrite=True),
        )
        return self.set_raw_dashboard_with_param(request)

    def delete_dashboard(self, slug: str) -> StatusMessage:
        """Delete a database dashboard by slug."""
        slug, from_database = clean_prefix(slug)
        if not from_database:
            raise GrafanaError(
                "only database dashboards (with 'db/' prefix in a slug) can be removed"
            )
        raw, _ = self._delete(f"api/dashboards/db/{slug}")
        return self._status_message(raw)

    def delete_dashboard_by_uid(self, uid: str) -> StatusMessage:
        """Delete a dashboard by uid."""
        raw, _ = self._delete(f"api/dashboards/uid/{uid}")
        return self._status_message(raw)