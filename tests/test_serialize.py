"""Tests for the YAML document format."""

from datetime import date, datetime, timedelta, timezone

import pytest
import yaml

from jira_watch.snapshot.serialize import (
    dump_record,
    format_timestamp,
    load_record,
    parse_timestamp,
    record_from_dict,
)

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


GO_WRITTEN_DOCUMENT = """\
name: my-bugs
jql: project = OTA AND assignee = currentUser()
description: Bugs assigned to me
last_fetched: "2025-03-04T10:20:30.123456789+01:00"
issues:
  - key: OTA-1
    summary: Crash on start
    component: Installer
    status: New
    last_updated: "2025-03-01T08:00:00Z"
    labels:
      - triaged
      - blocker
    assignee: Jane Doe
  - key: OTA-2
    summary: Typo in docs
    component: ""
    status: Done
    last_updated: "0001-01-01T00:00:00Z"
    labels: []
    assignee: ""
"""


class TestParseTimestamp:
    def test_none_and_empty(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_zulu(self):
        assert parse_timestamp("2025-01-01T12:00:00Z") == T0

    def test_nanosecond_fraction_truncated(self):
        parsed = parse_timestamp("2025-01-01T12:00:00.123456789Z")
        assert parsed == T0.replace(microsecond=123456)

    def test_short_fraction(self):
        parsed = parse_timestamp("2025-01-01T12:00:00.5Z")
        assert parsed == T0.replace(microsecond=500000)

    def test_jira_basic_offset(self):
        parsed = parse_timestamp("2025-01-01T14:00:00.000+0200")
        assert parsed == T0

    def test_naive_is_utc(self):
        parsed = parse_timestamp("2025-01-01T12:00:00")
        assert parsed == T0
        assert parsed.tzinfo is not None

    def test_go_zero_time_is_none(self):
        assert parse_timestamp("0001-01-01T00:00:00Z") is None

    def test_yaml_native_datetime(self):
        assert parse_timestamp(datetime(2025, 1, 1, 12, 0, 0)) == T0

    def test_yaml_native_date(self):
        assert parse_timestamp(date(2025, 1, 1)) == T0.replace(hour=0)

    def test_garbage_raises(self):
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")
        with pytest.raises(ValueError):
            parse_timestamp(42)

    def test_format_round_trip(self):
        assert parse_timestamp(format_timestamp(T0)) == T0
        assert format_timestamp(None) is None


class TestRoundTrip:
    def test_record_round_trip(self, make_item, make_record):
        record = make_record(
            issues=[
                make_item("OTA-3", labels=("b", "a")),
                make_item("OTA-1", last_updated=None, assignee=""),
                make_item("OTA-2", component="", summary="Ünïcode summary"),
            ]
        )
        loaded = load_record(dump_record(record))
        assert loaded == record
        assert [i.key for i in loaded.issues] == ["OTA-3", "OTA-1", "OTA-2"]

    def test_never_fetched_round_trip(self, make_record):
        record = make_record(last_fetched=None, issues=[])
        assert load_record(dump_record(record)) == record

    def test_stable_key_names(self, make_item, make_record):
        data = yaml.safe_load(dump_record(make_record(issues=[make_item()])))
        assert list(data) == ["name", "jql", "description", "last_fetched", "issues"]
        assert list(data["issues"][0]) == [
            "key",
            "summary",
            "component",
            "status",
            "last_updated",
            "labels",
            "assignee",
        ]


class TestCompatibility:
    def test_loads_document_written_by_earlier_release(self):
        record = load_record(GO_WRITTEN_DOCUMENT)
        assert record.name == "my-bugs"
        assert record.description == "Bugs assigned to me"
        plus_one = timezone(timedelta(hours=1))
        assert record.last_fetched == datetime(2025, 3, 4, 10, 20, 30, 123456, tzinfo=plus_one)

        first, second = record.issues
        assert first.labels == ("triaged", "blocker")
        assert first.last_updated == datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)
        assert second.last_updated is None
        assert second.component == ""

    def test_missing_optional_keys(self):
        record = record_from_dict(
            {"name": "x", "jql": "project = X", "issues": [{"key": "X-1", "status": "New"}]}
        )
        assert record.description == ""
        assert record.last_fetched is None
        item = record.issues[0]
        assert item.labels == ()
        assert item.assignee == ""
        assert item.component == ""

    def test_unquoted_yaml_timestamp(self):
        record = load_record("name: x\njql: q\nlast_fetched: 2025-01-01 12:00:00\nissues: []\n")
        assert record.last_fetched == T0


class TestMalformed:
    @pytest.mark.parametrize(
        "text",
        [
            "just a string",
            "- a\n- list\n",
            "jql: q\n",
            "name: x\n",
            "name: x\njql: q\nissues:\n  - summary: no key\n",
            "name: [unclosed\n",
        ],
    )
    def test_rejected(self, text):
        with pytest.raises(ValueError):
            load_record(text)
