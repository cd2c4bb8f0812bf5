"""Configuration loading and management for jira-watch.

Configuration sources are merged in priority order:
    1. Defaults (defined in WatchConfig)
    2. Global config (<user config dir>/ota/jira-watch.toml)
    3. Explicit config file (--config)
    4. Environment variables (JIRA_WATCH_* prefix)
    5. CLI overrides (passed as kwargs)

The resulting ``WatchConfig`` is built once at process start and handed to
the tracker client and the snapshot store; neither reads the environment
on its own.

Example:
    >>> config = load_config(jira_endpoint="https://jira.example.com")
    >>> config.jira_endpoint
    'https://jira.example.com'
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Mapping, Optional, get_type_hints

from .exceptions import ConfigurationError
from .storage.datadir import app_config_dir, default_queries_dir

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_ENDPOINT = "https://issues.redhat.com"
TOKEN_FILE_NAME = "jira-token"
CONFIG_FILE_NAME = "jira-watch.toml"
ENV_PREFIX = "JIRA_WATCH_"

_FIELD_TYPES = {
    "jira_endpoint": ((str,), "a string"),
    "bearer_token_file": ((str, type(None)), "a path string"),
    "page_size": ((int,), "an integer"),
    "timeout_seconds": ((int, float), "a number"),
    "data_dir": ((str, type(None)), "a path string"),
    "verbosity": ((str,), "a string"),
    "log_file": ((str, type(None)), "a path string"),
}


@dataclass(frozen=True)
class WatchConfig:
    """Settings shared by every command.

    Attributes:
        Tracker:
            jira_endpoint: Base URL of the Jira instance
            bearer_token_file: File holding the bearer token. None means the
                default ``<config dir>/ota/jira-token``, which may be absent
                (anonymous access); an explicit path must exist.
            page_size: Issues requested per search page
            timeout_seconds: Per-request HTTP timeout

        Storage:
            data_dir: Directory holding one YAML file per watch. None means
                ``<data dir>/ota/jira-queries``.

        Output:
            verbosity: Logging verbosity level
            log_file: Optional file that also receives log records
    """

    jira_endpoint: str = DEFAULT_ENDPOINT
    bearer_token_file: Optional[str] = None
    page_size: int = 100
    timeout_seconds: float = 30.0
    data_dir: Optional[str] = None
    verbosity: Verbosity = "normal"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        for field_name, (types, label) in _FIELD_TYPES.items():
            value = getattr(self, field_name)
            if value is None and type(None) in types:
                continue
            # bool is an int subclass
            if isinstance(value, bool) or not isinstance(value, types):
                raise ValueError(f"{field_name} must be {label}, got {value!r}")
        if not self.jira_endpoint.startswith(("http://", "https://")):
            raise ValueError("jira_endpoint must be an http(s) URL")
        if not 1 <= self.page_size <= 1000:
            raise ValueError("page_size must be between 1 and 1000")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of quiet, normal, verbose")

    @property
    def token_file(self) -> Path:
        """Resolved bearer token file path."""
        if self.bearer_token_file:
            return Path(self.bearer_token_file).expanduser()
        return app_config_dir() / TOKEN_FILE_NAME

    @property
    def token_file_required(self) -> bool:
        """True when the user named a token file explicitly."""
        return bool(self.bearer_token_file)

    @property
    def queries_dir(self) -> Path:
        """Resolved snapshot directory."""
        if self.data_dir:
            return Path(self.data_dir).expanduser()
        return default_queries_dir()


def load_config(config_file: Optional[Path] = None, **overrides) -> WatchConfig:
    """Merge every configuration source into one validated ``WatchConfig``.

    Args:
        config_file: TOML file given with ``--config``; must exist
        **overrides: Values from CLI flags. ``None`` means "flag not given"
            and never masks a lower source. ``verbose``/``quiet`` booleans
            are folded into ``verbosity``.

    Raises:
        ConfigurationError: If a file cannot be parsed or a value is invalid
    """
    layers = [_file_layer(app_config_dir() / CONFIG_FILE_NAME, required=False)]
    if config_file is not None:
        layers.append(_file_layer(Path(config_file), required=True))
    layers.append(_load_env_vars())
    layers.append(_cli_layer(overrides))

    merged: dict = {}
    for layer in layers:
        merged.update(layer)

    unknown = sorted(set(merged) - set(WatchConfig.__dataclass_fields__))
    if unknown:
        raise ConfigurationError("Unknown configuration option", key=", ".join(unknown))

    try:
        return WatchConfig(**merged)
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _cli_layer(overrides: dict) -> dict:
    overrides = dict(overrides)
    verbose = overrides.pop("verbose", False)
    quiet = overrides.pop("quiet", False)
    if quiet:
        overrides["verbosity"] = "quiet"
    elif verbose:
        overrides["verbosity"] = "verbose"
    return {key: value for key, value in overrides.items() if value is not None}


def _file_layer(path: Path, required: bool) -> dict:
    if not path.exists():
        if required:
            raise ConfigurationError(f"Config file not found: {path}")
        return {}
    try:
        return _load_toml_file(path)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}") from e


def _load_env_vars(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Read ``JIRA_WATCH_<FIELD>`` variables, e.g. ``JIRA_WATCH_PAGE_SIZE=50``.

    Every ``WatchConfig`` field has a variable; unset ones are skipped.
    """
    environ = os.environ if environ is None else environ
    type_hints = get_type_hints(WatchConfig)

    result: dict[str, Any] = {}
    for field_name in WatchConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        raw = environ.get(env_key)
        if raw is None:
            continue
        try:
            parsed = _parse_env_value(raw, type_hints[field_name])
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}", key=env_key, value=raw) from e
        if parsed is not None:
            result[field_name] = parsed
    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Convert one variable to its field's type; None for unsupported types.

    Raises:
        ValueError: If the text is not a valid int/float
    """
    args = [arg for arg in getattr(type_hint, "__args__", ()) if arg is not type(None)]
    if getattr(type_hint, "__origin__", None) is not Literal and len(args) == 1:
        type_hint = args[0]  # Optional[X]

    if type_hint in (int, float):
        return type_hint(value.strip())
    if type_hint is str or getattr(type_hint, "__origin__", None) is Literal:
        return value
    return None


def _load_toml_file(path: Path) -> dict:
    with open(path, "rb") as f:
        return tomllib.load(f)
