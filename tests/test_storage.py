"""Tests for the file-backed snapshot store."""

import logging
import os
import tempfile
from pathlib import Path

import pytest

from jira_watch.exceptions import InvalidWatchNameError, StorageError
from jira_watch.storage import SnapshotStore, default_queries_dir, slugify
from jira_watch.storage.datadir import app_config_dir, user_config_dir, user_data_dir
from jira_watch.storage.store import unslugify


class TestSlug:
    @pytest.mark.parametrize("name", ["my-bugs", "ota_4.15", "Release~1", "x"])
    def test_plain_names_unchanged(self, name):
        assert slugify(name) == name

    @pytest.mark.parametrize(
        "name", ["a/b", "../escape", "with space", "Ünïcode", ".hidden", "%41", "a\\b"]
    )
    def test_reversible(self, name):
        slug = slugify(name)
        assert "/" not in slug
        assert "\\" not in slug
        assert not slug.startswith(".")
        assert unslugify(slug) == name

    def test_distinct_names_distinct_slugs(self):
        names = ["a b", "a%20b", "a/b", "a%2Fb"]
        assert len({slugify(n) for n in names}) == len(names)

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidWatchNameError):
            slugify("")


class TestSaveLoad:
    def test_load_absent_returns_none(self, store):
        assert store.load("never-stored") is None
        assert not store.exists("never-stored")

    def test_directory_created_lazily(self, store):
        store.load("x")
        store.list_all()
        assert not store.data_dir.exists()

    def test_save_then_load(self, store, make_item, make_record):
        record = make_record(issues=[make_item("OTA-1"), make_item("OTA-2")])
        path = store.save(record)
        assert path == store.data_dir / "my-bugs.yaml"
        assert store.exists("my-bugs")
        assert store.load("my-bugs") == record

    def test_save_overwrites(self, store, make_item, make_record):
        store.save(make_record(issues=[make_item("OTA-1")]))
        replacement = make_record(jql="project = NEW", issues=[make_item("OTA-9")])
        store.save(replacement)
        assert store.load("my-bugs") == replacement

    def test_no_temp_files_left(self, store, make_record):
        store.save(make_record())
        store.save(make_record())
        assert sorted(p.name for p in store.data_dir.iterdir()) == ["my-bugs.yaml"]

    def test_odd_names_stay_inside_data_dir(self, store, make_record):
        store.save(make_record(name="../../etc/passwd"))
        files = list(store.data_dir.iterdir())
        assert len(files) == 1
        assert files[0].parent == store.data_dir
        assert store.load("../../etc/passwd").name == "../../etc/passwd"

    def test_failed_write_keeps_old_record(self, store, make_item, make_record, monkeypatch):
        original = make_record(issues=[make_item("OTA-1")])
        store.save(original)

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(StorageError):
            store.save(make_record(issues=[make_item("OTA-2")]))
        assert store.load("my-bugs") == original
        assert [p.name for p in store.data_dir.iterdir()] == ["my-bugs.yaml"]

    def test_temp_file_failure_raises_storage_error(self, store, make_record, monkeypatch):
        def broken_mkstemp(*args, **kwargs):
            raise OSError(36, "File name too long")

        monkeypatch.setattr(tempfile, "mkstemp", broken_mkstemp)
        with pytest.raises(StorageError) as exc_info:
            store.save(make_record())
        assert "File name too long" in str(exc_info.value)
        assert not store.exists("my-bugs")

    def test_long_name_fits_temp_file(self, store, make_record):
        name = "x" * 240
        store.save(make_record(name=name))
        assert store.load(name).name == name
        assert len(list(store.data_dir.iterdir())) == 1

    def test_unparseable_file_raises(self, store):
        store.data_dir.mkdir(parents=True)
        (store.data_dir / "broken.yaml").write_text("name: [unclosed\n", encoding="utf-8")
        with pytest.raises(StorageError) as exc_info:
            store.load("broken")
        assert "broken.yaml" in str(exc_info.value)


class TestDelete:
    def test_delete_existing(self, store, make_record):
        store.save(make_record())
        assert store.delete("my-bugs") is True
        assert store.load("my-bugs") is None

    def test_repeated_delete_is_safe(self, store, make_record):
        store.save(make_record())
        store.delete("my-bugs")
        assert store.delete("my-bugs") is False
        assert store.delete("never-existed") is False


class TestListing:
    def test_missing_directory_lists_nothing(self, store):
        assert store.list_all() == []
        assert store.list_names() == []

    def test_list_all_summaries(self, store, make_item, make_record):
        store.save(make_record(name="b-watch", issues=[make_item("X-1"), make_item("X-2")]))
        store.save(make_record(name="a-watch", description="first", issues=[]))

        summaries = store.list_all()
        assert [s.name for s in summaries] == ["a-watch", "b-watch"]
        assert summaries[0].description == "first"
        assert summaries[0].issue_count == 0
        assert summaries[1].issue_count == 2
        assert summaries[1].jql == "project = OTA"

    def test_list_names_decodes_slugs(self, store, make_record):
        store.save(make_record(name="team/ota"))
        assert store.list_names() == ["team/ota"]

    def test_unreadable_records_skipped(self, store, make_record, caplog):
        caplog.set_level(logging.WARNING, logger="jira_watch")
        store.save(make_record(name="good"))
        (store.data_dir / "bad.yaml").write_text("- not\n- a mapping\n", encoding="utf-8")
        (store.data_dir / "notes.txt").write_text("ignored", encoding="utf-8")

        summaries = store.list_all()
        assert [s.name for s in summaries] == ["good"]
        assert "bad.yaml" in caplog.text


class TestDataDir:
    def test_linux_default(self):
        home = Path("/home/u")
        assert user_data_dir(env={}, platform="linux", home=home) == home / ".local" / "share"
        assert user_config_dir(env={}, platform="linux", home=home) == home / ".config"

    def test_xdg_overrides(self):
        env = {"XDG_DATA_HOME": "/xdg/data", "XDG_CONFIG_HOME": "/xdg/config"}
        assert user_data_dir(env=env, platform="linux") == Path("/xdg/data")
        assert user_config_dir(env=env, platform="linux") == Path("/xdg/config")

    def test_macos(self):
        home = Path("/Users/u")
        expected = home / "Library" / "Application Support"
        assert user_data_dir(env={}, platform="darwin", home=home) == expected
        assert user_config_dir(env={}, platform="darwin", home=home) == expected

    def test_windows(self):
        env = {"LOCALAPPDATA": "C:/Local", "APPDATA": "C:/Roaming"}
        assert user_data_dir(env=env, platform="win32") == Path("C:/Local")
        assert user_config_dir(env=env, platform="win32") == Path("C:/Roaming")
        assert user_data_dir(env={"APPDATA": "C:/Roaming"}, platform="win32") == Path(
            "C:/Roaming"
        )

    def test_namespaced_locations(self):
        env = {"XDG_DATA_HOME": "/d", "XDG_CONFIG_HOME": "/c"}
        assert default_queries_dir(env=env, platform="linux") == Path("/d/ota/jira-queries")
        assert app_config_dir(env=env, platform="linux") == Path("/c/ota")


RAW_NAMED_DOCUMENT = """\
name: my bugs
jql: project = OTA
description: ""
last_fetched: "2025-03-04T10:20:30Z"
issues:
  - key: OTA-1
    summary: Crash on start
    component: Installer
    status: New
    last_updated: "2025-03-01T08:00:00Z"
    labels: []
    assignee: ""
"""


class TestRawNameFiles:
    """Earlier releases named each file after the raw watch name."""

    @pytest.fixture
    def legacy_file(self, store):
        store.data_dir.mkdir(parents=True)
        path = store.data_dir / "my bugs.yaml"
        path.write_text(RAW_NAMED_DOCUMENT, encoding="utf-8")
        return path

    def test_load_and_exists(self, store, legacy_file):
        record = store.load("my bugs")
        assert record is not None
        assert record.name == "my bugs"
        assert [i.key for i in record.issues] == ["OTA-1"]
        assert store.exists("my bugs")
        assert [s.name for s in store.list_all()] == ["my bugs"]

    def test_save_replaces_raw_name_file(self, store, legacy_file, make_record):
        store.save(make_record(name="my bugs", issues=[]))
        assert not legacy_file.exists()
        assert [p.name for p in store.data_dir.iterdir()] == ["my%20bugs.yaml"]
        assert store.load("my bugs").issues == []
        assert [s.name for s in store.list_all()] == ["my bugs"]

    def test_delete(self, store, legacy_file):
        assert store.delete("my bugs") is True
        assert not legacy_file.exists()
        assert store.delete("my bugs") is False

    def test_no_fallback_outside_data_dir(self, store):
        assert store.legacy_path_for("../escape") is None
        assert store.legacy_path_for("team/ota") is None
        assert store.legacy_path_for("my-bugs") is None
        assert store.legacy_path_for("my bugs") == store.data_dir / "my bugs.yaml"
