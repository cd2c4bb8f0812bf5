"""Watch snapshots: normalized issues and the records that hold them."""

from .models import Item, WatchRecord, WatchSummary

__all__ = ["Item", "WatchRecord", "WatchSummary"]
