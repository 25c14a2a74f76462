# grafclient

A Python client for the Grafana HTTP API. It covers dashboards and search,
dashboard versions, folders and folder permissions, datasources,
annotations, snapshots, alert notification channels, organisations and
their members, users, teams and the server health endpoint.

## Installation

```
pip install grafclient
```

To run the test suite, install the test extra and run pytest:

```
pip install "grafclient[test]"
pytest
```

## Connecting

`grafclient.client.Client` takes the base URL of the Grafana server, an
optional credential string and an optional `requests.Session` (a new
session is made when none is given).

The credential string is either a Grafana API key, sent as a bearer token
in the `Authorization` header, or `username:password` for basic
authentication (any string holding a colon is treated as basic-auth
credentials). An empty string or `None` means no authentication.

```python
import requests
from grafclient.client import Client

client = Client("http://localhost:3000", "placeholder", requests.Session())

health = client.get_health()
print(health.database, health.version)
```

`Client` combines the per-area classes `DashboardAPI`, `AnnotationAPI`,
`DatasourceAPI`, `FolderAPI`, `AlertNotificationAPI`, `OrgAPI`, `UserAPI`
and `TeamAPI`, each of which can also be used on its own with the same
constructor arguments.

## Dashboards and search

```python
from grafclient.params import search_query, search_tag, query_param_limit

# Folders and dashboards whose title contains "latency" and tagged "prod"
found = client.search(search_query("latency"), search_tag("prod"))

# Title substring, starred flag, then any number of tags
found = client.search_dashboards("latency", False, "prod", "backend")

board, properties = client.get_dashboard_by_uid("abc123")     # dict, BoardProperties
raw_json, properties = client.get_raw_dashboard_by_uid("abc123")  # bytes as sent

versions = client.get_dashboard_versions_by_dashboard_id(42, query_param_limit(10))
```

Search results are `FoundBoard` records and versions are
`DashboardVersion` records. Dashboards themselves are plain dictionaries.

To store a dashboard:

- `set_dashboard(board, params)` takes a dashboard dictionary and
  `SetDashboardParams(folder_id=..., overwrite=...)`. Unless `overwrite` is
  set, the dashboard id is cleared so Grafana creates a new one.
- `set_raw_dashboard_with_param(request)` takes a `RawBoardRequest`
  holding the dashboard as raw JSON and its `SetDashboardParams`; the id is
  cleared unless `preserve_id` is set.
- `set_raw_dashboard(raw)` stores raw JSON in the general folder,
  overwriting.

Dashboards addressed by slug default to database dashboards: a slug
without a prefix is looked up under `db/`, and one starting with `file/`
is read from the server's file provisioning. Only database dashboards can
be stored with `set_dashboard` or deleted with `delete_dashboard`;
`delete_dashboard_by_uid` deletes by uid.

## Other areas

- Annotations: `create_annotation`, `patch_annotation`, `get_annotations`,
  `delete_annotation`; snapshots: `create_snapshot` with a
  `CreateSnapshotRequest`.
- Datasources: `get_all_datasources`, `get_datasource`,
  `get_datasource_by_name`, `create_datasource`, `update_datasource`,
  `delete_datasource`, `delete_datasource_by_name`, `get_datasource_types`.
- Folders: `get_all_folders`, `get_folder_by_uid`, `get_folder_by_id`,
  `create_folder`, `update_folder_by_uid`, `delete_folder_by_uid`,
  `get_folder_permissions`, `update_folder_permissions`.
- Alert notification channels: get, create, update and delete by id or uid.
- Organisations: the current organisation and others by id or name, their
  users (with `UserRole`), preferences and addresses.
- Users: `get_actual_user`, `get_user`, `get_all_users`,
  `search_users_with_paging`, `switch_actual_user_context`.
- Teams: `search_teams`, `get_team_by_name`, `get_team`, `create_team`,
  `update_team`, `delete_team`, team members and team preferences.

Users, teams, team members and team preferences come back as dataclasses
(`User`, `PageUsers`, `Team`, `PageTeams`, `TeamMember`,
`TeamPreferences`); datasources, folders, organisations, notification
channels and annotations come back as plain dictionaries. Write operations
return a `StatusMessage`.

## Query helpers

`grafclient.params` holds small builders for query-string options:

- search: `search_query`, `search_tag`, `search_type` (with
  `SearchParamType.FOLDER` or `SearchParamType.DASHBOARD`),
  `search_dashboard_id`, `search_folder_id`, `search_starred`,
  `search_limit`, `search_page`
- dashboard versions: `query_param_start`, `query_param_limit`
- annotations: `with_tag`, `with_limit`, `with_annotation_type`,
  `with_alert_type`, `with_dashboard`, `with_panel`, `with_user`,
  `with_start_time`, `with_end_time`
- folders: `folder_limit`
- teams: `with_query`, `with_pagesize`, `with_page`, `with_team`

Repeatable options (tags, dashboard and folder ids) accumulate; the others
keep only the last value given. An empty search query or tag and a zero
search limit or page are left out. `build_query` applies any number of
them to a fresh dictionary of query values.

```python
from datetime import datetime, timezone
from grafclient.params import with_tag, with_start_time

annotations = client.get_annotations(
    with_tag("deploy"),
    with_start_time(datetime(2024, 1, 1, tzinfo=timezone.utc)),
)
```

## Errors

Failures talking to the server raise `GrafanaError` from
`grafclient.transport`. Calls that check the reply status raise its
subclass `HTTPStatusError` on anything but 200; its message carries the
status code and the response body, and `status_code` and `body` are kept
as attributes. `get_team_by_name` raises `TeamNotFoundError` when no team
matches. Negative values given to the numeric query helpers, and a
non-positive id given to `get_folder_by_id`, raise `ValueError`.

```python
from grafclient.transport import GrafanaError, TeamNotFoundError

try:
    team = client.get_team_by_name("ops")
except TeamNotFoundError:
    team = None
except GrafanaError as exc:
    print("request failed:", exc)
```

## What it does not do

- There is no typed model of a dashboard's contents (panels, rows,
  templating); dashboards are read and written as dictionaries or raw JSON.
- There are no administrator user operations: creating or deleting users
  and changing their passwords or permissions are not offered, although
  `UserPassword` and `UserPermissions` records exist.
- There is no command-line tool; the package is a library only.