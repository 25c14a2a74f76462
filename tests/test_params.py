from datetime import datetime, timezone

import pytest

from grafclient.params import (
    SearchParamType,
    build_query,
    folder_limit,
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
    with_alert_type,
    with_annotation_type,
    with_dashboard,
    with_end_time,
    with_limit,
    with_page,
    with_pagesize,
    with_panel,
    with_query,
    with_start_time,
    with_tag,
    with_team,
    with_user,
)


def test_annotation_options():
    values = build_query(
        with_tag("foo"),
        with_tag("bar"),
        with_limit(3),
        with_annotation_type(),
        with_dashboard(1),
    )
    assert values["limit"] == ["3"]
    assert values["tags"] == ["foo", "bar"]
    assert values["type"] == ["annotation"]
    assert values["dashboardId"] == ["1"]


def test_alert_type_panel_and_user():
    values = build_query(with_alert_type(), with_panel(7), with_user(9))
    assert values == {"type": ["alert"], "panelId": ["7"], "userId": ["9"]}


def test_start_and_end_time_in_milliseconds():
    start = datetime(2020, 1, 1, tzinfo=timezone.utc)
    end = datetime(2020, 1, 1, 0, 0, 1, 500000, tzinfo=timezone.utc)
    values = build_query(with_start_time(start), with_end_time(end))
    assert values["from"] == ["1577836800000"]
    assert values["to"] == ["1577836801500"]


def test_search_query_is_not_repeatable():
    values = {}
    for text in ["foo", "bar"]:
        search_query(text)(values)
        assert values["query"] == [text]


def test_search_query_empty_is_ignored():
    assert build_query(search_query("")) == {}


@pytest.mark.parametrize(
    "factory,key,inputs,expected",
    [
        (search_tag, "tag", ["foo", "bar"], ["foo", "bar"]),
        (search_dashboard_id, "dashboardIds", [100, 200], ["100", "200"]),
        (search_folder_id, "folderIds", [100, 200], ["100", "200"]),
    ],
)
def test_repeatable_search_params(factory, key, inputs, expected):
    values = {}
    for index, item in enumerate(inputs):
        factory(item)(values)
        assert len(values[key]) == index + 1
        assert values[key][index] == expected[index]


def test_search_tag_empty_is_ignored():
    assert build_query(search_tag("")) == {}


@pytest.mark.parametrize("factory,key", [(search_page, "page"), (search_limit, "limit")])
def test_non_zero_uint_search_params(factory, key):
    values = {}
    factory(0)(values)
    assert key not in values
    for number in [100, 200]:
        factory(number)(values)
        assert values[key] == [str(number)]


def test_search_starred():
    values = {}
    for flag, text in [(True, "true"), (False, "false")]:
        search_starred(flag)(values)
        assert values["starred"] == [text]


def test_search_type():
    values = {}
    for kind in [SearchParamType.FOLDER, SearchParamType.DASHBOARD]:
        search_type(kind)(values)
        assert values["type"] == [kind.value]
    assert SearchParamType.FOLDER.value == "dash-folder"
    assert SearchParamType.DASHBOARD.value == "dash-db"


def test_non_repeatable_search_options_keep_last():
    values = build_query(
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
    )
    assert values == {
        "limit": ["100"],
        "page": ["99"],
        "query": ["Q2"],
        "starred": ["false"],
        "type": ["dash-db"],
    }


def test_query_param_start_and_limit():
    assert build_query(query_param_start(0), query_param_limit(10)) == {
        "start": ["0"],
        "limit": ["10"],
    }


def test_folder_limit():
    assert build_query(folder_limit(5), folder_limit(6)) == {"limit": ["6"]}


def test_team_params():
    values = build_query(with_query("ops"), with_pagesize(50), with_page(2), with_team("core"))
    assert values == {
        "query": ["ops"],
        "perpage": ["50"],
        "page": ["2"],
        "team": ["core"],
    }


def test_build_query_empty():
    assert build_query() == {}


@pytest.mark.parametrize("factory", [with_limit, search_limit, search_page, with_page, folder_limit])
def test_negative_unsigned_rejected(factory):
    with pytest.raises(ValueError):
        factory(-1)