"""Jira REST client that turns a JQL query into normalized Items.

Only two calls are exposed: ``search`` returns every matching issue
(paging is handled here, callers get one flat list) and ``validate`` runs a
one-result probe so a malformed query fails before anything else happens.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from ..config import WatchConfig
from ..exceptions import ConfigurationError, QueryError, TransportError
from ..logging_config import get_logger
from ..snapshot.models import Item
from ..snapshot.serialize import parse_timestamp

logger = get_logger(__name__)

SEARCH_PATH = "/rest/api/2/search"
SEARCH_FIELDS = "summary,components,status,updated,labels,assignee"

_JIRA_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"


def read_bearer_token(config: WatchConfig) -> Optional[str]:
    """Token from the configured file, or None for anonymous access.

    Raises:
        ConfigurationError: If an explicitly configured file is missing or empty
    """
    path = config.token_file
    try:
        token = path.read_text(encoding="utf-8").strip()
    except FileNotFoundError:
        if config.token_file_required:
            raise ConfigurationError(
                f"Bearer token file not found: {path}", key="bearer_token_file", value=path
            )
        logger.debug("No token file at %s, using anonymous access", path)
        return None
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read bearer token file: {e}", key="bearer_token_file", value=path
        )

    if not token:
        if config.token_file_required:
            raise ConfigurationError(
                f"Bearer token file is empty: {path}", key="bearer_token_file", value=path
            )
        return None
    return token


def parse_jira_time(value: Optional[str]) -> Optional[datetime]:
    """Parse Jira's ``2024-05-01T10:00:00.000+0000`` timestamps."""
    if not value:
        return None
    try:
        return datetime.strptime(value, _JIRA_TIME_FORMAT)
    except ValueError:
        return parse_timestamp(value)


def convert_issue(raw: Dict[str, Any]) -> Item:
    """Normalize one issue from a search response."""
    key = raw.get("key", "")
    fields = raw.get("fields") or {}

    components = fields.get("components") or []
    component = ""
    if components:
        component = components[0].get("name", "")
        if len(components) > 1:
            dropped = ", ".join(c.get("name", "") for c in components[1:])
            logger.warning("%s has %d components, keeping '%s' and ignoring: %s",
                           key, len(components), component, dropped)

    status = (fields.get("status") or {}).get("name", "")
    assignee = (fields.get("assignee") or {}).get("displayName", "")

    try:
        updated = parse_jira_time(fields.get("updated"))
    except ValueError as e:
        raise TransportError(f"unexpected 'updated' value on {key}: {e}") from e

    return Item(
        key=key,
        summary=fields.get("summary") or "",
        component=component,
        status=status,
        last_updated=updated,
        labels=tuple(fields.get("labels") or ()),
        assignee=assignee,
    )


class JiraClient:
    """Runs JQL searches against one Jira endpoint.

    Args:
        config: Endpoint, credentials, page size and timeout.
        http_client: Pre-built client (tests inject one backed by
            ``httpx.MockTransport``). When omitted the client owns its own.
    """

    def __init__(self, config: WatchConfig, http_client: Optional[httpx.Client] = None) -> None:
        self.config = config
        self.base_url = config.jira_endpoint.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client

    @property
    def http(self) -> httpx.Client:
        """The HTTP client, built on first use so credentials are only read when needed."""
        if self._http is None:
            token = read_bearer_token(self.config)
            headers = {"Accept": "application/json"}
            if token:
                headers["Authorization"] = f"Bearer {token}"
            self._http = httpx.Client(headers=headers, timeout=self.config.timeout_seconds)
        return self._http

    def close(self) -> None:
        if self._owns_client and self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "JiraClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── public API ────────────────────────────────────────────────

    def validate(self, jql: str) -> None:
        """Probe the query with a single result.

        Raises:
            QueryError: If Jira rejects the query
            TransportError: If Jira cannot be reached
        """
        self._search_page(jql, start_at=0, max_results=1)

    def search(self, jql: str) -> List[Item]:
        """Return every issue matching ``jql``, across all result pages.

        Raises:
            QueryError: If Jira rejects the query
            TransportError: If Jira cannot be reached
        """
        items: List[Item] = []
        start_at = 0
        while True:
            page = self._search_page(jql, start_at=start_at, max_results=self.config.page_size)
            issues = page.get("issues") or []
            items.extend(convert_issue(raw) for raw in issues)

            total = page.get("total")
            start_at += len(issues)
            if not issues or total is None or start_at >= total:
                break

        logger.debug("Query returned %d issues", len(items))
        return items

    # ── transport ─────────────────────────────────────────────────

    def _search_page(self, jql: str, start_at: int, max_results: int) -> Dict[str, Any]:
        url = f"{self.base_url}{SEARCH_PATH}"
        params = {
            "jql": jql,
            "startAt": start_at,
            "maxResults": max_results,
            "fields": SEARCH_FIELDS,
        }
        logger.debug("GET %s startAt=%d maxResults=%d", url, start_at, max_results)

        try:
            response = self.http.get(url, params=params)
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__, url=url) from e

        if response.status_code == 400:
            raise QueryError(jql, _error_messages(response))
        if response.status_code in (401, 403):
            raise TransportError(
                "authentication failed", url=url, status_code=response.status_code
            )
        if response.is_error:
            raise TransportError(
                f"unexpected HTTP status {response.status_code}",
                url=url,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError(f"invalid JSON in search response: {e}", url=url) from e
        if not isinstance(payload, dict):
            raise TransportError("search response is not a JSON object", url=url)
        return payload


def _error_messages(response: httpx.Response) -> List[str]:
    """Jira's ``errorMessages`` / ``errors`` from a 400 body, verbatim."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return [text] if text else []
    if not isinstance(body, dict):
        return []
    messages = [str(m) for m in body.get("errorMessages") or []]
    messages.extend(f"{k}: {v}" for k, v in (body.get("errors") or {}).items())
    return messages
