"""Alert notification channels."""

from __future__ import annotations

import json
from typing import Any, Mapping

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


class AlertNotificationAPI(BaseClient):
    """Operations on alert notification channels."""

    def get_all_alert_notifications(self) -> list[dict[str, Any]]:
        """List all notification channels."""
        raw, status = self._get("api/alert-notifications")
        self._ensure_ok(status, raw)
        data = self._decode_json(raw)
        if data is None:
            return []
        if not isinstance(data, list):
            raise GrafanaError("unexpected response: expected a JSON array")
        return data

    def get_alert_notification_uid(self, uid: str) -> dict[str, Any]:
        """Get a notification channel by uid."""
        raw, status = self._get(f"api/alert-notifications/uid/{uid}")
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))

    def get_alert_notification_id(self, notification_id: int) -> dict[str, Any]:
        """Get a notification channel by id."""
        raw, status = self._get(f"api/alert-notifications/{notification_id}")
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw))

    def create_alert_notification(self, notification: Mapping[str, Any]) -> int:
        """Create a notification channel and return its id."""
        raw, status = self._post("api/alert-notifications", _marshal(notification))
        self._ensure_ok(status, raw)
        return _object(self._decode_json(raw)).get("id") or 0

    def update_alert_notification_uid(
        self, notification: Mapping[str, Any], uid: str
    ) -> None:
        """Update the notification channel with the given uid."""
        raw, status = self._put(f"api/alert-notifications/uid/{uid}", _marshal(notification))
        self._ensure_ok(status, raw)

    def update_alert_notification_id(
        self, notification: Mapping[str, Any], notification_id: int
    ) -> None:
        """Update the notification channel with the given id."""
        raw, status = self._put(
            f"api/alert-notifications/{notification_id}", _marshal(notification)
        )
        self._ensure_ok(status, raw)

    def delete_alert_notification_uid(self, uid: str) -> None:
        """Delete the notification channel with the given uid."""
        raw, status = self._delete(f"api/alert-notifications/uid/{uid}")
        self._ensure_ok(status, raw)

    def delete_alert_notification_id(self, notification_id: int) -> None:
        """Delete the notification channel with the given id."""
        raw, status = self._delete(f"api/alert-notifications/{notification_id}")
        self._ensure_ok(status, raw)