"""Shared test fixtures for jira-watch tests."""

from datetime import datetime, timedelta, timezone

import pytest

from jira_watch.snapshot.models import Item, WatchRecord
from jira_watch.storage import SnapshotStore

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_user_dirs(tmp_path, monkeypatch):
    """Keep every test away from the real config and data directories."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config-home"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data-home"))
    for var in (
        "JIRA_WATCH_JIRA_ENDPOINT",
        "JIRA_WATCH_BEARER_TOKEN_FILE",
        "JIRA_WATCH_PAGE_SIZE",
        "JIRA_WATCH_TIMEOUT_SECONDS",
        "JIRA_WATCH_DATA_DIR",
        "JIRA_WATCH_VERBOSITY",
        "JIRA_WATCH_LOG_FILE",
    ):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def store(tmp_path):
    return SnapshotStore(tmp_path / "queries")


def _make_item(key="OTA-1", **kwargs):
    defaults = {
        "summary": f"Summary of {key}",
        "component": "Installer",
        "status": "New",
        "last_updated": T0,
        "labels": ("triaged",),
        "assignee": "Jane Doe",
    }
    defaults.update(kwargs)
    return Item(key=key, **defaults)


def _make_record(name="my-bugs", issues=None, **kwargs):
    defaults = {
        "jql": "project = OTA",
        "description": "Bugs assigned to me",
        "last_fetched": T0 - timedelta(hours=3),
    }
    defaults.update(kwargs)
    return WatchRecord(name=name, issues=list(issues or []), **defaults)


@pytest.fixture
def make_item():
    """Factory for Items with realistic defaults; override any field by keyword."""
    return _make_item


@pytest.fixture
def make_record():
    """Factory for WatchRecords fetched three hours before ``T0``."""
    return _make_record
