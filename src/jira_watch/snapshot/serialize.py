"""YAML document format for watch records.

One document per watch::

    name: my-bugs
    jql: project = OTA AND assignee = currentUser()
    description: Bugs assigned to me
    last_fetched: '2025-01-01T12:00:00+00:00'
    issues:
    - key: OTA-1
      summary: Crash on start
      component: Installer
      status: New
      last_updated: '2025-01-01T11:30:00+00:00'
      labels:
      - triaged
      assignee: Jane Doe

The key names are a compatibility surface: files written by earlier
releases (including the ones that wrote Go-style RFC 3339 timestamps with
nanosecond fractions and the ``0001-01-01T00:00:00Z`` zero time) must keep
loading without loss.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

import yaml

from .models import Item, WatchRecord

_FRACTION_RE = re.compile(r"\.(\d+)")
_BASIC_OFFSET_RE = re.compile(r"([+-]\d{2})(\d{2})$")


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Read a timestamp written by any release; naive values are UTC.

    Returns None for null, empty and Go's zero time.

    Raises:
        ValueError: If the value is not a recognisable timestamp
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        text = _FRACTION_RE.sub(lambda m: "." + (m.group(1) + "000000")[:6], text)
        text = _BASIC_OFFSET_RE.sub(r"\1:\2", text)
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"not a timestamp: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    if parsed.year <= 1:
        return None
    return parsed


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO 8601 text, or None when there is no timestamp."""
    if value is None:
        return None
    return value.isoformat()


def item_to_dict(item: Item) -> Dict[str, Any]:
    return {
        "key": item.key,
        "summary": item.summary,
        "component": item.component,
        "status": item.status,
        "last_updated": format_timestamp(item.last_updated),
        "labels": list(item.labels),
        "assignee": item.assignee,
    }


def item_from_dict(data: Dict[str, Any]) -> Item:
    if not isinstance(data, dict):
        raise ValueError(f"issue entry must be a mapping, got {type(data).__name__}")
    if not data.get("key"):
        raise ValueError("issue entry has no key")
    return Item(
        key=str(data["key"]),
        summary=_text(data.get("summary")),
        component=_text(data.get("component")),
        status=_text(data.get("status")),
        last_updated=parse_timestamp(data.get("last_updated")),
        labels=tuple(str(label) for label in (data.get("labels") or [])),
        assignee=_text(data.get("assignee")),
    )


def record_to_dict(record: WatchRecord) -> Dict[str, Any]:
    return {
        "name": record.name,
        "jql": record.jql,
        "description": record.description,
        "last_fetched": format_timestamp(record.last_fetched),
        "issues": [item_to_dict(item) for item in record.issues],
    }


def record_from_dict(data: Dict[str, Any]) -> WatchRecord:
    """Build a record from a parsed document.

    Raises:
        ValueError: If required keys are missing or malformed
    """
    if not isinstance(data, dict):
        raise ValueError("document is not a mapping")
    if not data.get("name"):
        raise ValueError("document has no name")
    if "jql" not in data:
        raise ValueError("document has no jql")
    return WatchRecord(
        name=str(data["name"]),
        jql=_text(data.get("jql")),
        description=_text(data.get("description")),
        last_fetched=parse_timestamp(data.get("last_fetched")),
        issues=[item_from_dict(entry) for entry in (data.get("issues") or [])],
    )


def dump_record(record: WatchRecord) -> str:
    """Serialise a record to YAML text."""
    return yaml.safe_dump(
        record_to_dict(record),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def load_record(text: str) -> WatchRecord:
    """Parse YAML text into a record.

    Raises:
        ValueError: If the text is not a valid watch document
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"malformed YAML: {e}") from e
    return record_from_dict(data)


def _text(value: Any) -> str:
    return "" if value is None else str(value)
