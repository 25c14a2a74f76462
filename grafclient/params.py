"""Query parameter builders for search, annotation, folder and team requests."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Callable

QueryValues = dict[str, list[str]]
QueryParam = Callable[[QueryValues], None]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SearchParamType(str, Enum):
    """Kinds of entities a search can be restricted to."""

    FOLDER = "dash-folder"
    DASHBOARD = "dash-db"


def _set(values: QueryValues, key: str, value: str) -> None:
    values[key] = [value]


def _add(values: QueryValues, key: str, value: str) -> None:
    values.setdefault(key, []).append(value)


def _unsigned(value: int, name: str) -> str:
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return str(value)


def _to_milliseconds(moment: datetime) -> int:
    if moment.tzinfo is None:
        moment = moment.astimezone()
    delta = moment - _EPOCH
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    millis = abs(micros) // 1000
    return millis if micros >= 0 else -millis


def build_query(*params: QueryParam) -> QueryValues:
    """Apply the given parameters, in order, to a fresh set of query values."""
    values: QueryValues = {}
    for param in params:
        param(values)
    return values


def query_param_start(start: int) -> QueryParam:
    """Set the ``start`` parameter."""
    text = _unsigned(start, "start")
    return lambda values: _set(values, "start", text)


def query_param_limit(limit: int) -> QueryParam:
    """Set the ``limit`` parameter."""
    text = _unsigned(limit, "limit")
    return lambda values: _set(values, "limit", text)


def search_query(query: str) -> QueryParam:
    """Search by title substring; an empty query is ignored, the last one wins."""

    def apply(values: QueryValues) -> None:
        if query:
            _set(values, "query", query)

    return apply


def search_tag(tag: str) -> QueryParam:
    """Search for a tag; repeatable (logical OR), empty tags are ignored."""

    def apply(values: QueryValues) -> None:
        if tag:
            _add(values, "tag", tag)

    return apply


def search_type(search_type: SearchParamType | str) -> QueryParam:
    """Restrict the search to one kind of entity; the last one wins."""
    text = search_type.value if isinstance(search_type, SearchParamType) else str(search_type)
    return lambda values: _set(values, "type", text)


def search_dashboard_id(dashboard_id: int) -> QueryParam:
    """Search for a dashboard id; repeatable (logical OR)."""
    text = str(dashboard_id)
    return lambda values: _add(values, "dashboardIds", text)


def search_folder_id(folder_id: int) -> QueryParam:
    """Search within a folder id; repeatable (logical OR)."""
    text = str(folder_id)
    return lambda values: _add(values, "folderIds", text)


def search_starred(starred: bool) -> QueryParam:
    """Restrict the search to starred dashboards or not; the last one wins."""
    text = "true" if starred else "false"
    return lambda values: _set(values, "starred", text)


def search_limit(limit: int) -> QueryParam:
    """Cap the number of results; zero leaves the parameter out."""
    text = _unsigned(limit, "limit")

    def apply(values: QueryValues) -> None:
        if limit > 0:
            _set(values, "limit", text)

    return apply


def search_page(page: int) -> QueryParam:
    """Select a result page, counted from one; zero leaves the parameter out."""
    text = _unsigned(page, "page")

    def apply(values: QueryValues) -> None:
        if page > 0:
            _set(values, "page", text)

    return apply


def with_tag(tag: str) -> QueryParam:
    """Filter annotations by a tag; repeatable."""
    return lambda values: _add(values, "tags", tag)


def with_limit(limit: int) -> QueryParam:
    """Cap the number of annotations returned."""
    text = _unsigned(limit, "limit")
    return lambda values: _set(values, "limit", text)


def with_annotation_type() -> QueryParam:
    """Return annotations only."""
    return lambda values: _set(values, "type", "annotation")


def with_alert_type() -> QueryParam:
    """Return alerts only."""
    return lambda values: _set(values, "type", "alert")


def with_dashboard(dashboard_id: int) -> QueryParam:
    """Filter annotations by dashboard id."""
    text = _unsigned(dashboard_id, "dashboard id")
    return lambda values: _set(values, "dashboardId", text)


def with_panel(panel_id: int) -> QueryParam:
    """Filter annotations by panel id."""
    text = _unsigned(panel_id, "panel id")
    return lambda values: _set(values, "panelId", text)


def with_user(user_id: int) -> QueryParam:
    """Filter annotations by the id of the user who made them."""
    text = _unsigned(user_id, "user id")
    return lambda values: _set(values, "userId", text)


def with_start_time(moment: datetime) -> QueryParam:
    """Return annotations after the given moment."""
    text = str(_to_milliseconds(moment))
    return lambda values: _set(values, "from", text)


def with_end_time(moment: datetime) -> QueryParam:
    """Return annotations before the given moment."""
    text = str(_to_milliseconds(moment))
    return lambda values: _set(values, "to", text)


def folder_limit(limit: int) -> QueryParam:
    """Cap the number of folders returned."""
    text = _unsigned(limit, "limit")
    return lambda values: _set(values, "limit", text)


def with_query(query: str) -> QueryParam:
    """Filter teams by a query string."""
    return lambda values: _set(values, "query", query)


def with_pagesize(size: int) -> QueryParam:
    """Set the number of teams per page."""
    text = _unsigned(size, "page size")
    return lambda values: _set(values, "perpage", text)


def with_page(page: int) -> QueryParam:
    """Select a page of teams."""
    text = _unsigned(page, "page")
    return lambda values: _set(values, "page", text)


def with_team(team: str) -> QueryParam:
    """Filter teams by exact name."""
    return lambda values: _set(values, "team", team)