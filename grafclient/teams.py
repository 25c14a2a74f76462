"""Teams, their members and preferences."""

from __future__ import annotations

import json
from typing import Any, Mapping

from .models import PageTeams, StatusMessage, Team, TeamMember, TeamPreferences
from .params import QueryParam, build_query, with_team
from .transport import BaseClient, GrafanaError, TeamNotFoundError


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


def _team_payload(team: Team | Mapping[str, Any]) -> dict[str, Any]:
    return team.to_dict() if isinstance(team, Team) else dict(team)


def _preferences_payload(prefs: TeamPreferences | Mapping[str, Any]) -> dict[str, Any]:
    return prefs.to_dict() if isinstance(prefs, TeamPreferences) else dict(prefs)


class TeamAPI(BaseClient):
    """Operations on teams."""

    def _team_status(self, raw: bytes) -> StatusMessage:
        data = self._decode_json(raw)
        if data is None:
            return StatusMessage()
        if not isinstance(data, dict):
            raise GrafanaError("unexpected status message format")
        return StatusMessage.from_dict(data)

    def _team_fetch(self, path: str, what: str, params: Any = None) -> Any:
        raw, status = self._get(path, params)
        self._ensure_ok(status, raw)
        return _decode(raw, what)

    def search_teams(self, *params: QueryParam) -> PageTeams:
        """Search teams; paging and filters are given as query parameters."""
        data = self._team_fetch("api/teams/search", "teams", build_query(*params))
        try:
            return PageTeams.from_dict(_object(data, "teams"))
        except (TypeError, AttributeError) as exc:
            raise GrafanaError(f"unmarshal teams: {exc}") from exc

    def get_team_by_name(self, name: str) -> Team:
        """Get the first team whose name matches exactly."""
        page = self.search_teams(with_team(name))
        if not page.teams:
            raise TeamNotFoundError()
        return page.teams[0]

    def get_team(self, team_id: int) -> Team:
        """Get a team by id."""
        data = self._team_fetch(f"api/teams/{team_id}", "team")
        return Team.from_dict(_object(data, "team"))

    def create_team(self, team: Team | Mapping[str, Any]) -> StatusMessage:
        """Create a team."""
        raw, _ = self._post("api/teams", _marshal(_team_payload(team)))
        return self._team_status(raw)

    def update_team(self, team_id: int, team: Team | Mapping[str, Any]) -> StatusMessage:
        """Update the team with the given id."""
        raw, _ = self._put(f"api/teams/{team_id}", _marshal(_team_payload(team)))
        return self._team_status(raw)

    def delete_team(self, team_id: int) -> StatusMessage:
        """Delete the team with the given id."""
        raw, _ = self._delete(f"api/teams/{team_id}")
        return self._team_status(raw)

    def get_team_members(self, team_id: int) -> list[TeamMember]:
        """List the members of a team."""
        data = self._team_fetch(f"api/teams/{team_id}/members", "team")
        if data is None:
            return []
        if not isinstance(data, list):
            raise GrafanaError("unmarshal team: expected a JSON array")
        return [TeamMember.from_dict(_object(item, "team")) for item in data]

    def add_team_member(self, team_id: int, user_id: int) -> StatusMessage:
        """Add a user to a team."""
        raw, _ = self._post(f"api/teams/{team_id}/members", _marshal({"userId": user_id}))
        return self._team_status(raw)

    def delete_team_member(self, team_id: int, user_id: int) -> StatusMessage:
        """Remove a user from a team."""
        raw, _ = self._delete(f"api/teams/{team_id}/members/{user_id}")
        return self._team_status(raw)

    def get_team_preferences(self, team_id: int) -> TeamPreferences:
        """Get the preferences of a team."""
        data = self._team_fetch(f"api/teams/{team_id}/preferences", "team")
        return TeamPreferences.from_dict(_object(data, "team"))

    def update_team_preferences(
        self, team_id: int, preferences: TeamPreferences | Mapping[str, Any]
    ) -> StatusMessage:
        """Update the preferences of a team."""
        raw, _ = self._put(
            f"api/teams/{team_id}/preferences",
            _marshal(_preferences_payload(preferences)),
        )
        return self._team_status(raw)