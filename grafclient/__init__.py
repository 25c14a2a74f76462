"""Client for the Grafana HTTP API: dashboards, folders, datasources, annotations, organisations, users and teams."""

__version__ = "0.1.0"