[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "grafclient"
version = "0.1.0"
description = "Client for the Grafana HTTP API: dashboards, search, folders, datasources, annotations, snapshots, alert notifications, organisations, users and teams."
requires-python = ">=3.10"
dependencies = [
    "requests",
]
keywords = ["grafana", "monitoring", "dashboards", "http-api", "client"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["grafclient"]

[tool.hatch.build.targets.sdist]
include = ["grafclient", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
