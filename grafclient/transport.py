"""HTTP plumbing shared by every part of the Grafana client."""

from __future__ import annotations

import json
import posixpath
import re
from typing import Any, Mapping, Sequence
from urllib.parse import urlencode, urlsplit, urlunsplit

import requests

_USER_AGENT = "autograf"


class GrafanaError(Exception):
    """Base class for errors raised by the client."""


class HTTPStatusError(GrafanaError):
    """The server answered with an unexpected status code."""

    def __init__(self, status_code: int, body: bytes | str = b"") -> None:
        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else body
        super().__init__(f"HTTP error {status_code}: returns {text}")
        self.status_code = status_code
        self.body = text


class TeamNotFoundError(GrafanaError):
    """No team matched the lookup."""

    def __init__(self, message: str = "team not found") -> None:
        super().__init__(message)


Params = Mapping[str, "str | Sequence[str]"]


def _join_path(base: str, path: str) -> str:
    joined = "/".join(part for part in (base, path) if part)
    if not joined:
        return ""
    cleaned = posixpath.normpath(re.sub("/{2,}", "/", joined))
    if cleaned == ".":
        return ""
    return cleaned if cleaned.startswith("/") else "/" + cleaned


def _encode_query(params: Params) -> str:
    pairs = []
    for key in sorted(params):
        values = params[key]
        if isinstance(values, str):
            values = [values]
        pairs.extend((key, value) for value in values)
    return urlencode(pairs)


def _encode_body(payload: Any) -> bytes:
    if payload is None:
        return b""
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    return json.dumps(payload).encode("utf-8")


class BaseClient:
    """Sends requests to a Grafana server.

    ``api_key_or_basic_auth`` is either ``user:password`` credentials or an
    API key; an empty string or ``None`` disables authentication.
    """

    def __init__(
        self,
        api_url: str,
        api_key_or_basic_auth: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        credentials = api_key_or_basic_auth or str()
        self._base = urlsplit(api_url)
        self.base_url = urlunsplit(self._base)
        self.basic_auth = ":" in credentials
        self._key: str | None = None
        self._auth: tuple[str, str] | None = None
        if credentials:
            if self.basic_auth:
                head, _, tail = credentials.partition(":")
                self._auth = (head, tail)
            else:
                self._key = f"Bearer {credentials}"
        self._session = session if session is not None else requests.Session()

    def _url(self, path: str, params: Params | None) -> str:
        query = self._base.query if params is None else _encode_query(params)
        return urlunsplit(
            (
                self._base.scheme,
                self._base.netloc,
                _join_path(self._base.path, path),
                query,
                self._base.fragment,
            )
        )

    def _request(
        self,
        method: str,
        path: str,
        params: Params | None = None,
        body: bytes | None = None,
    ) -> tuple[bytes, int]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": _USER_AGENT,
        }
        if not self.basic_auth and self._key:
            headers["Authorization"] = self._key
        try:
            response = self._session.request(
                method,
                self._url(path, params),
                data=body,
                headers=headers,
                auth=self._auth,
            )
        except requests.RequestException as exc:
            raise GrafanaError(str(exc)) from exc
        return response.content, response.status_code

    def _get(self, path: str, params: Params | None = None) -> tuple[bytes, int]:
        return self._request("GET", path, params)

    def _post(
        self, path: str, payload: Any = None, params: Params | None = None
    ) -> tuple[bytes, int]:
        return self._request("POST", path, params, _encode_body(payload))

    def _put(
        self, path: str, payload: Any = None, params: Params | None = None
    ) -> tuple[bytes, int]:
        return self._request("PUT", path, params, _encode_body(payload))

    def _patch(
        self, path: str, payload: Any = None, params: Params | None = None
    ) -> tuple[bytes, int]:
        return self._request("PATCH", path, params, _encode_body(payload))

    def _delete(self, path: str) -> tuple[bytes, int]:
        return self._request("DELETE", path)

    @staticmethod
    def _ensure_ok(status: int, raw: bytes) -> None:
        if status != 200:
            raise HTTPStatusError(status, raw)

    @staticmethod
    def _decode_json(raw: bytes) -> Any:
        try:
            return json.loads(raw)
        except ValueError as exc:
            raise GrafanaError(f"cannot decode response: {exc}") from exc