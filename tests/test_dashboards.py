import json
from datetime import datetime, timezone
from urllib.parse import parse_qs, urlsplit

import pytest
import responses

from grafclient.dashboards import DashboardAPI, clean_prefix, set_prefix
from grafclient.models import RawBoardRequest, SetDashboardParams
from grafclient.params import (
    SearchParamType,
    query_param_limit,
    query_param_start,
    search_dashboard_id,
    search_folder_id,
    search_limit,
    search_page,
    search_query,
    search_starred,
    search_tag,
    search_type,
)
from grafclient.transport import GrafanaError, HTTPStatusError

BASE = "http://grafana.example.com"


@pytest.fixture
def rsps():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as mock:
        yield mock


@pytest.fixture
def api():
    return DashboardAPI(BASE, "")


def _query_of(call):
    return parse_qs(urlsplit(call.request.url).query, keep_blank_values=True)


def _path_of(call):
    return urlsplit(call.request.url).path


@pytest.mark.parametrize(
    "query,starred,tags,expected",
    [
        ("", False, [], {"type": ["dash-db"], "starred": ["false"]}),
        ("", True, [], {"type": ["dash-db"], "starred": ["true"]}),
        ("Foo", False, [], {"type": ["dash-db"], "query": ["Foo"], "starred": ["false"]}),
        (
            "",
            False,
            ["Foo", "Bar"],
            {"type": ["dash-db"], "starred": ["false"], "tag": ["Foo", "Bar"]},
        ),
    ],
)
def test_search_dashboards_query(rsps, api, query, starred, tags, expected):
    rsps.add(responses.GET, f"{BASE}/api/search", body="[]")
    result = api.search_dashboards(query, starred, *tags)
    assert result == []
    call = rsps.calls[0]
    assert call.request.method == "GET"
    assert _path_of(call) == "/api/search"
    assert _query_of(call) == expected


@pytest.mark.parametrize(
    "params,expected",
    [
        ([], {}),
        (
            [
                search_dashboard_id(234),
                search_dashboard_id(432),
                search_folder_id(123),
                search_folder_id(321),
                search_limit(10),
                search_page(99),
                search_query("Q"),
                search_starred(True),
                search_tag("Foo"),
                search_tag("Bar"),
                search_type(SearchParamType.FOLDER),
            ],
            {
                "dashboardIds": ["234", "432"],
                "folderIds": ["123", "321"],
                "limit": ["10"],
                "page": ["99"],
                "query": ["Q"],
                "starred": ["true"],
                "tag": ["Foo", "Bar"],
                "type": ["dash-folder"],
            },
        ),
        (
            [
                search_limit(10),
                search_limit(100),
                search_page(88),
                search_page(99),
                search_query("Q1"),
                search_query("Q2"),
                search_starred(True),
                search_starred(False),
                search_type(SearchParamType.FOLDER),
                search_type(SearchParamType.DASHBOARD),
            ],
            {
                "limit": ["100"],
                "page": ["99"],
                "query": ["Q2"],
                "starred": ["false"],
                "type": ["dash-db"],
            },
        ),
    ],
)
def test_search_query(rsps, api, params, expected):
    rsps.add(responses.GET, f"{BASE}/api/search", body="[]")
    assert api.search(*params) == []
    assert _query_of(rsps.calls[0]) == expected


def test_search_decodes_found_boards(rsps, api):
    body = [{"id": 3, "uid": "abc", "title": "Home", "tags": ["a"], "folderId": 2}]
    rsps.add(responses.GET, f"{BASE}/api/search", json=body)
    boards = api.search()
    assert len(boards) == 1
    assert boards[0].uid == "abc"
    assert boards[0].tags == ["a"]
    assert boards[0].folder_id == 2


def test_search_http_error(rsps, api):
    rsps.add(responses.GET, f"{BASE}/api/search", body="denied", status=403)
    with pytest.raises(HTTPStatusError) as info:
        api.search()
    assert info.value.status_code == 403
    assert "denied" in str(info.value)


@pytest.mark.parametrize("preserve_id,expected_id", [(True, 25), (False, 0)])
def test_set_raw_dashboard_with_param_body(rsps, api, preserve_id, expected_id):
    rsps.add(responses.POST, f"{BASE}/api/dashboards/db", json={"status": "success"})
    request = RawBoardRequest(
        dashboard=json.dumps({"id": 25, "title": "woot"}),
        parameters=SetDashboardParams(folder_id=27, overwrite=True, preserve_id=preserve_id),
    )
    reply = api.set_raw_dashboard_with_param(request)
    assert reply.status == "success"
    sent = json.loads(rsps.calls[0].request.body)
    assert sent["FolderID"] == 27
    assert sent["Overwrite"] is True
    assert sent["dashboard"]["id"] == expected_id
    assert sent["dashboard"]["title"] == "woot"


def test_set_raw_dashboard_defaults(rsps, api):
    rsps.add(responses.POST, f"{BASE}/api/dashboards/db", json={"uid": "u1"})
    reply = api.set_raw_dashboard(b'{"id": 9, "title": "t"}')
    assert reply.uid == "u1"
    sent = json.loads(rsps.calls[0].request.body)
    assert sent == {"dashboard": {"id": 0, "title": "t"}, "FolderID": 0, "Overwrite": True}


def test_set_raw_dashboard_error_uses_message(rsps, api):
    rsps.add(
        responses.POST,
        f"{BASE}/api/dashboards/db",
        json={"message": "version-mismatched"},
        status=412,
    )
    with pytest.raises(HTTPStatusError) as info:
        api.set_raw_dashboard('{"title": "t"}')
    assert info.value.status_code == 412
    assert "version-mismatched" in str(info.value)


def test_set_dashboard_clears_id_without_overwrite(rsps, api):
    rsps.add(responses.POST, f"{BASE}/api/dashboards/db", json={"id": 11, "slug": "foo"})
    board = {"id": 5, "slug": "db/foo", "title": "t"}
    reply = api.set_dashboard(board, SetDashboardParams(folder_id=3, overwrite=False))
    assert reply.id == 11
    sent = json.loads(rsps.calls[0].request.body)
    assert sent["dashboard"] == {"id": 0, "slug": "foo", "title": "t"}
    assert sent["folderId"] == 3
    assert sent["overwrite"] is False
    assert board["id"] == 5


def test_set_dashboard_keeps_id_with_overwrite(rsps, api):
    rsps.add(responses.POST, f"{BASE}/api/dashboards/db", json={"version": 2})
    reply = api.set_dashboard({"id": 5, "title": "t"}, SetDashboardParams(overwrite=True))
    assert reply.version == 2
    sent = json.loads(rsps.calls[0].request.body)
    assert sent["dashboard"]["id"] == 5
    assert sent["overwrite"] is True


def test_set_dashboard_rejects_file_dashboard(rsps, api):
    with pytest.raises(GrafanaError, match="only database dashboard"):
        api.set_dashboard({"slug": "file/foo"}, SetDashboardParams())
    assert len(rsps.calls) == 0


def test_set_dashboard_error_status(rsps, api):
    rsps.add(
        responses.POST, f"{BASE}/api/dashboards/db", json={"message": "name-exists"}, status=412
    )
    with pytest.raises(HTTPStatusError, match="name-exists"):
        api.set_dashboard({"title": "t"}, SetDashboardParams())


def test_get_dashboard_by_uid(rsps, api):
    body = {
        "meta": {"slug": "home", "version": 4, "created": "2020-01-01T00:00:00Z"},
        "dashboard": {"id": 7, "uid": "abc", "title": "Home"},
    }
    rsps.add(responses.GET, f"{BASE}/api/dashboards/uid/abc", json=body)
    board, meta = api.get_dashboard_by_uid("abc")
    assert board == {"id": 7, "uid": "abc", "title": "Home"}
    assert meta.slug == "home"
    assert meta.version == 4
    assert meta.created == datetime(2020, 1, 1, tzinfo=timezone.utc)


def test_get_dashboard_by_slug_adds_db_prefix(rsps, api):
    body = {"meta": {}, "dashboard": {"title": "x"}}
    rsps.add(responses.GET, f"{BASE}/api/dashboards/db/my-board", json=body)
    board, _ = api.get_dashboard_by_slug("my-board")
    assert board == {"title": "x"}
    assert _path_of(rsps.calls[0]) == "/api/dashboards/db/my-board"


def test_get_raw_dashboard_keeps_bytes_untouched(rsps, api):
    body = '{"meta": {"slug": "s"}, "dashboard": {"b": 1.50, "a":2}}'
    rsps.add(responses.GET, f"{BASE}/api/dashboards/uid/u", body=body)
    raw, meta = api.get_raw_dashboard_by_uid("u")
    assert raw == b'{"b": 1.50, "a":2}'
    assert meta.slug == "s"


def test_get_raw_dashboard_by_slug_file(rsps, api):
    body = '{"dashboard":{"title":"f"},"meta":{"isHome":true}}'
    rsps.add(responses.GET, f"{BASE}/api/dashboards/file/f.json", body=body)
    raw, meta = api.get_raw_dashboard_by_slug("file/f.json")
    assert raw == b'{"title":"f"}'
    assert meta.is_home is True


def test_get_dashboard_not_found(rsps, api):
    rsps.add(responses.GET, f"{BASE}/api/dashboards/uid/gone", body="missing", status=404)
    with pytest.raises(HTTPStatusError) as info:
        api.get_dashboard_by_uid("gone")
    assert info.value.status_code == 404


def test_get_dashboard_invalid_body(rsps, api):
    rsps.add(responses.GET, f"{BASE}/api/dashboards/uid/bad", body="[1, 2]")
    with pytest.raises(GrafanaError):
        api.get_dashboard_by_uid("bad")


def test_get_dashboard_versions(rsps, api):
    body = [
        {"id": 2, "dashboardId": 9, "version": 2, "message": "second"},
        {"id": 1, "dashboardId": 9, "version": 1},
    ]
    rsps.add(responses.GET, f"{BASE}/api/dashboards/id/9/versions", json=body)
    versions = api.get_dashboard_versions_by_dashboard_id(
        9, query_param_start(0), query_param_limit(10)
    )
    assert [v.version for v in versions] == [2, 1]
    assert versions[0].message == "second"
    assert _query_of(rsps.calls[0]) == {"start": ["0"], "limit": ["10"]}


def test_get_dashboard_versions_error(rsps, api):
    rsps.add(responses.GET, f"{BASE}/api/dashboards/id/42/versions", body="no", status=404)
    with pytest.raises(HTTPStatusError):
        api.get_dashboard_versions_by_dashboard_id(42)


def test_delete_dashboard(rsps, api):
    rsps.add(responses.DELETE, f"{BASE}/api/dashboards/db/foo", json={"title": "foo"})
    reply = api.delete_dashboard("db/foo")
    assert reply.message is None
    assert _path_of(rsps.calls[0]) == "/api/dashboards/db/foo"


def test_delete_dashboard_rejects_file(rsps, api):
    with pytest.raises(GrafanaError, match="can be removed"):
        api.delete_dashboard("file/foo")
    assert len(rsps.calls) == 0


def test_delete_dashboard_by_uid(rsps, api):
    rsps.add(
        responses.DELETE, f"{BASE}/api/dashboards/uid/abc", json={"message": "Dashboard deleted"}
    )
    reply = api.delete_dashboard_by_uid("abc")
    assert reply.message == "Dashboard deleted"


@pytest.mark.parametrize(
    "slug,expected",
    [
        ("foo", "db/foo"),
        ("db/foo", "db/foo"),
        ("file/foo.json", "file/foo.json"),
        ("dbx", "dbx"),
    ],
)
def test_set_prefix(slug, expected):
    assert set_prefix(slug) == expected


@pytest.mark.parametrize(
    "slug,expected",
    [
        ("db/foo", ("foo", True)),
        ("file/foo", ("e/foo", False)),
        ("foo", ("foo", True)),
        ("", ("", True)),
    ],
)
def test_clean_prefix(slug, expected):
    assert clean_prefix(slug) == expected