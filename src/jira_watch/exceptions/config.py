"""Configuration exceptions: config files, environment values, credentials."""

from typing import Any, Optional

from .base import JiraWatchError


class ConfigurationError(JiraWatchError):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, key: Optional[str] = None, value: Any = None):
        details = {}
        if key is not None:
            details["key"] = key
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details=details)
        self.key = key
        self.value = value
