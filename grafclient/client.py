"""The complete Grafana client."""

from __future__ import annotations

from .alert_notifications import AlertNotificationAPI
from .annotations import AnnotationAPI
from .dashboards import DashboardAPI
from .datasources import DatasourceAPI
from .folders import FolderAPI
from .models import HealthResponse
from .orgs import OrgAPI
from .teams import TeamAPI
from .transport import GrafanaError
from .users import UserAPI


class Client(
    DashboardAPI,
    AnnotationAPI,
    DatasourceAPI,
    FolderAPI,
    AlertNotificationAPI,
    OrgAPI,
    UserAPI,
    TeamAPI,
):
    """Client for every part of the Grafana HTTP API.

    ``api_key_or_basic_auth`` is either ``user:password`` credentials or an
    API key; an empty string disables authentication.
    """

    def get_health(self) -> HealthResponse:
        """Report the health of the server."""
        raw, _ = self._get("/api/health")
        data = self._decode_json(raw)
        if data is None:
            return HealthResponse()
        if not isinstance(data, dict):
            raise GrafanaError("unexpected health response format")
        return HealthResponse.from_dict(data)