"""Snapshot persistence under the per-user data directory."""

from .datadir import default_queries_dir
from .store import SnapshotStore, slugify

__all__ = ["SnapshotStore", "default_queries_dir", "slugify"]
