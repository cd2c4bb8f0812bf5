"""Issue tracker access: JQL in, normalized Items out."""

from .client import JiraClient, convert_issue

__all__ = ["JiraClient", "convert_issue"]
