"""Snapshot comparison: which issues appeared, disappeared or changed."""

from .engine import compare, compare_items
from .models import TRACKED_FIELDS, DiffResult, FieldChange

__all__ = ["compare", "compare_items", "DiffResult", "FieldChange", "TRACKED_FIELDS"]
