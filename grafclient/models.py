"""Data records exchanged with the Grafana HTTP API."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Mapping

DEFAULT_FOLDER_ID = 0
"""Id of the general folder, which always exists and cannot be removed."""

_ZERO_TIME = "0001-01-01T00:00:00Z"
_FRACTION = re.compile(r"\.(\d+)")


def _opt(data: Mapping[str, Any], key: str, default: Any) -> Any:
    value = data.get(key)
    return default if value is None else value


def _parse_time(value: str | None) -> datetime | None:
    """Parse an RFC 3339 timestamp as Grafana sends it."""
    if not value:
        return None
    text = value
    if text[-1] in "Zz":
        text = text[:-1] + "+00:00"
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"invalid timestamp {value!r}") from exc


def _format_time(moment: datetime | None) -> str:
    if moment is None:
        return _ZERO_TIME
    text = moment.isoformat()
    if moment.utcoffset() == timedelta(0):
        text = text[: -len("+00:00")] + "Z"
    return text


@dataclass
class StatusMessage:
    """Status reply returned by most write operations."""

    id: int | None = None
    org_id: int | None = None
    message: str | None = None
    slug: str | None = None
    version: int | None = None
    status: str | None = None
    uid: str | None = None
    url: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StatusMessage":
        return cls(
            id=data.get("id"),
            org_id=data.get("orgId"),
            message=data.get("message"),
            slug=data.get("slug"),
            version=data.get("version"),
            status=data.get("status"),
            uid=data.get("uid"),
            url=data.get("url"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "orgId": self.org_id,
            "message": self.message,
            "slug": self.slug,
            "version": self.version,
            "status": self.status,
            "uid": self.uid,
            "url": self.url,
        }


@dataclass
class HealthResponse:
    """Health report of a Grafana server."""

    commit: str = ""
    database: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "HealthResponse":
        return cls(
            commit=_opt(data, "commit", ""),
            database=_opt(data, "database", ""),
            version=_opt(data, "version", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"commit": self.commit, "database": self.database, "version": self.version}


@dataclass
class Team:
    id: int = 0
    name: str = ""
    email: str = ""
    org_id: int = 0
    created: str = ""
    updated: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Team":
        return cls(
            id=_opt(data, "id", 0),
            name=_opt(data, "name", ""),
            email=_opt(data, "email", ""),
            org_id=_opt(data, "orgId", 0),
            created=_opt(data, "created", ""),
            updated=_opt(data, "updated", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "orgId": self.org_id,
            "created": self.created,
            "updated": self.updated,
        }


@dataclass
class PageTeams:
    """One page of a team search."""

    total_count: int = 0
    teams: list[Team] = field(default_factory=list)
    page: int = 0
    per_page: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageTeams":
        return cls(
            total_count=_opt(data, "totalCount", 0),
            teams=[Team.from_dict(item) for item in _opt(data, "teams", [])],
            page=_opt(data, "page", 0),
            per_page=_opt(data, "perPage", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCount": self.total_count,
            "teams": [team.to_dict() for team in self.teams],
            "page": self.page,
            "perPage": self.per_page,
        }


@dataclass
class TeamMember:
    org_id: int = 0
    team_id: int = 0
    user_id: int = 0
    email: str = ""
    login: str = ""
    avatar_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TeamMember":
        return cls(
            org_id=_opt(data, "orgId", 0),
            team_id=_opt(data, "teamId", 0),
            user_id=_opt(data, "userId", 0),
            email=_opt(data, "email", ""),
            login=_opt(data, "login", ""),
            avatar_url=_opt(data, "avatarUrl", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "orgId": self.org_id,
            "teamId": self.team_id,
            "userId": self.user_id,
            "email": self.email,
            "login": self.login,
            "avatarUrl": self.avatar_url,
        }


@dataclass
class TeamPreferences:
    theme: str = ""
    home_dashboard_id: int = 0
    timezone: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TeamPreferences":
        return cls(
            theme=_opt(data, "theme", ""),
            home_dashboard_id=_opt(data, "homeDashboardId", 0),
            timezone=_opt(data, "timezone", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "theme": self.theme,
            "homeDashboardId": self.home_dashboard_id,
            "timezone": self.timezone,
        }


@dataclass
class User:
    id: int = 0
    login: str = ""
    name: str = ""
    email: str = ""
    org_id: int = 0
    theme: str = ""
    password: str = ""
    is_disabled: bool = False
    auth_labels: list[str] = field(default_factory=list)
    is_grafana_admin: bool = False
    is_external: bool = False
    is_admin: bool = False  # reported by the search endpoint

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        return cls(
            id=_opt(data, "id", 0),
            login=_opt(data, "login", ""),
            name=_opt(data, "name", ""),
            email=_opt(data, "email", ""),
            org_id=_opt(data, "orgId", 0),
            theme=_opt(data, "theme", ""),
            password=_opt(data, "password", ""),
            is_disabled=_opt(data, "isDisabled", False),
            auth_labels=list(_opt(data, "authLabels", [])),
            is_grafana_admin=_opt(data, "isGrafanaAdmin", False),
            is_external=_opt(data, "isExternal", False),
            is_admin=_opt(data, "isAdmin", False),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "login": self.login,
            "name": self.name,
            "email": self.email,
            "orgId": self.org_id,
            "theme": self.theme,
            "password": self.password,
            "isDisabled": self.is_disabled,
            "authLabels": list(self.auth_labels),
            "isGrafanaAdmin": self.is_grafana_admin,
            "isExternal": self.is_external,
            "isAdmin": self.is_admin,
        }


@dataclass
class UserRole:
    login_or_email: str = ""
    role: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserRole":
        return cls(
            login_or_email=_opt(data, "loginOrEmail", ""),
            role=_opt(data, "role", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"loginOrEmail": self.login_or_email, "role": self.role}


@dataclass
class UserPermissions:
    is_grafana_admin: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserPermissions":
        return cls(is_grafana_admin=_opt(data, "isGrafanaAdmin", False))

    def to_dict(self) -> dict[str, Any]:
        return {"isGrafanaAdmin": self.is_grafana_admin}


@dataclass
class PageUsers:
    """One page of a user search."""

    total_count: int = 0
    users: list[User] = field(default_factory=list)
    page: int = 0
    per_page: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PageUsers":
        return cls(
            total_count=_opt(data, "totalCount", 0),
            users=[User.from_dict(item) for item in _opt(data, "users", [])],
            page=_opt(data, "page", 0),
            per_page=_opt(data, "perPage", 0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCount": self.total_count,
            "users": [user.to_dict() for user in self.users],
            "page": self.page,
            "perPage": self.per_page,
        }


@dataclass
class UserPassword:
    password: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserPassword":
        return cls(password=_opt(data, "password", ""))

    def to_dict(self) -> dict[str, Any]:
        return {"password": self.password}


@dataclass
class CreateSnapshotRequest:
    """Request body for creating a dashboard snapshot."""

    expires: int = 0
    dashboard: Any = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"expires": self.expires, "dashboard": self.dashboard}


@dataclass
class BoardProperties:
    """Metadata Grafana keeps about a dashboard."""

    is_starred: bool = False
    is_home: bool = False
    is_snapshot: bool = False
    type: str = ""
    can_save: bool = False
    can_edit: bool = False
    can_star: bool = False
    slug: str = ""
    expires: datetime | None = None
    created: datetime | None = None
    updated: datetime | None = None
    updated_by: str = ""
    created_by: str = ""
    version: int = 0
    folder_id: int = 0
    folder_title: str = ""
    folder_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BoardProperties":
        return cls(
            is_starred=_opt(data, "isStarred", False),
            is_home=_opt(data, "isHome", False),
            is_snapshot=_opt(data, "isSnapshot", False),
            type=_opt(data, "type", ""),
            can_save=_opt(data, "canSave", False),
            can_edit=_opt(data, "canEdit", False),
            can_star=_opt(data, "canStar", False),
            slug=_opt(data, "slug", ""),
            expires=_parse_time(data.get("expires")),
            created=_parse_time(data.get("created")),
            updated=_parse_time(data.get("updated")),
            updated_by=_opt(data, "updatedBy", ""),
            created_by=_opt(data, "createdBy", ""),
            version=_opt(data, "version", 0),
            folder_id=_opt(data, "folderId", 0),
            folder_title=_opt(data, "folderTitle", ""),
            folder_url=_opt(data, "folderUrl", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.is_starred:
            result["isStarred"] = True
        if self.is_home:
            result["isHome"] = True
        if self.is_snapshot:
            result["isSnapshot"] = True
        if self.type:
            result["type"] = self.type
        result.update(
            {
                "canSave": self.can_save,
                "canEdit": self.can_edit,
                "canStar": self.can_star,
                "slug": self.slug,
                "expires": _format_time(self.expires),
                "created": _format_time(self.created),
                "updated": _format_time(self.updated),
                "updatedBy": self.updated_by,
                "createdBy": self.created_by,
                "version": self.version,
                "folderId": self.folder_id,
                "folderTitle": self.folder_title,
                "folderUrl": self.folder_url,
            }
        )
        return result


@dataclass
class DashboardVersion:
    """One entry of a dashboard's version history."""

    id: int = 0
    dashboard_id: int = 0
    parent_version: int = 0
    restored_from: int = 0
    version: int = 0
    created: datetime | None = None
    created_by: str = ""
    message: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DashboardVersion":
        return cls(
            id=_opt(data, "id", 0),
            dashboard_id=_opt(data, "dashboardId", 0),
            parent_version=_opt(data, "parentVersion", 0),
            restored_from=_opt(data, "restoredFrom", 0),
            version=_opt(data, "version", 0),
            created=_parse_time(data.get("created")),
            created_by=_opt(data, "createdBy", ""),
            message=_opt(data, "message", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "dashboardId": self.dashboard_id,
            "parentVersion": self.parent_version,
            "restoredFrom": self.restored_from,
            "version": self.version,
            "created": _format_time(self.created),
            "createdBy": self.created_by,
            "message": self.message,
        }


@dataclass
class FoundBoard:
    """A dashboard or folder returned by a search."""

    id: int = 0
    uid: str = ""
    title: str = ""
    uri: str = ""
    url: str = ""
    slug: str = ""
    type: str = ""
    tags: list[str] = field(default_factory=list)
    is_starred: bool = False
    folder_id: int = 0
    folder_uid: str = ""
    folder_title: str = ""
    folder_url: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FoundBoard":
        return cls(
            id=_opt(data, "id", 0),
            uid=_opt(data, "uid", ""),
            title=_opt(data, "title", ""),
            uri=_opt(data, "uri", ""),
            url=_opt(data, "url", ""),
            slug=_opt(data, "slug", ""),
            type=_opt(data, "type", ""),
            tags=list(_opt(data, "tags", [])),
            is_starred=_opt(data, "isStarred", False),
            folder_id=_opt(data, "folderId", 0),
            folder_uid=_opt(data, "folderUid", ""),
            folder_title=_opt(data, "folderTitle", ""),
            folder_url=_opt(data, "folderUrl", ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "uid": self.uid,
            "title": self.title,
            "uri": self.uri,
            "url": self.url,
            "slug": self.slug,
            "type": self.type,
            "tags": list(self.tags),
            "isStarred": self.is_starred,
            "folderId": self.folder_id,
            "folderUid": self.folder_uid,
            "folderTitle": self.folder_title,
            "folderUrl": self.folder_url,
        }


@dataclass
class SetDashboardParams:
    """Where and how a dashboard is stored."""

    folder_id: int = DEFAULT_FOLDER_ID
    overwrite: bool = False
    preserve_id: bool = False


@dataclass
class RawBoardRequest:
    """A dashboard given as raw JSON, with the parameters to store it."""

    dashboard: bytes | str
    parameters: SetDashboardParams = field(default_factory=SetDashboardParams)

    def to_json(self) -> str:
        """Serialize as Grafana expects; the dashboard id is zeroed unless preserved."""
        board = json.loads(self.dashboard)
        if not isinstance(board, dict):
            raise ValueError("dashboard JSON must be an object")
        if not self.parameters.preserve_id:
            board["id"] = 0
        return json.dumps(
            {
                "dashboard": board,
                "FolderID": self.parameters.folder_id,
                "Overwrite": self.parameters.overwrite,
            }
        )