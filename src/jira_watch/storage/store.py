"""File-backed snapshot store: one YAML document per watch.

Usage::

    store = SnapshotStore(config.queries_dir)
    previous = store.load("my-bugs")      # None for a first-time watch
    store.save(record)                    # atomic whole-file replace

There is no locking. When two processes refresh the same watch at once the
last ``save`` wins.
"""

import os
import tempfile
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote, unquote

from ..exceptions import InvalidWatchNameError, StorageError
from ..logging_config import get_logger
from ..snapshot.models import WatchRecord, WatchSummary
from ..snapshot.serialize import dump_record, load_record

logger = get_logger(__name__)

_SUFFIX = ".yaml"


def slugify(name: str) -> str:
    """Filesystem-safe, reversible encoding of a watch name.

    Letters, digits and ``-_.~`` pass through unchanged, so plain names map
    to the same file names earlier releases used.
    """
    if not name:
        raise InvalidWatchNameError(name, "name must not be empty")
    slug = quote(name, safe="")
    if slug.startswith("."):
        slug = "%2E" + slug[1:]
    return slug


def unslugify(slug: str) -> str:
    return unquote(slug)


class SnapshotStore:
    """Persists watch records under a single directory.

    The directory is created on first write, never on read.
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)

    # ── addressing ────────────────────────────────────────────────

    def path_for(self, name: str) -> Path:
        return self.data_dir / f"{slugify(name)}{_SUFFIX}"

    def legacy_path_for(self, name: str) -> Optional[Path]:
        """File name earlier releases used (the raw name), when it differs.

        None when the raw name is the slug already or would leave the data
        directory.
        """
        if not name or "\0" in name or Path(name).name != name:
            return None
        path = self.data_dir / f"{name}{_SUFFIX}"
        if path == self.path_for(name):
            return None
        return path

    def _candidate_paths(self, name: str) -> List[Path]:
        paths = [self.path_for(name)]
        legacy = self.legacy_path_for(name)
        if legacy is not None:
            paths.append(legacy)
        return paths

    def _ensure_dir(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create data directory: {e}", path=self.data_dir) from e

    # ── single records ────────────────────────────────────────────

    def save(self, record: WatchRecord) -> Path:
        """Write ``record``, replacing any existing record of the same name.

        The document goes to a temp file in the same directory which is then
        renamed over the target, so readers see either the old or the new
        version in full.

        Raises:
            StorageError: If the record cannot be written
        """
        target = self.path_for(record.name)
        self._ensure_dir()
        text = dump_record(record)

        tmp_path: Optional[Path] = None
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=".", suffix=".tmp", dir=str(self.data_dir))
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, target)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write query file: {e}", path=target) from e

        logger.debug("Saved query '%s' (%d issues) to %s", record.name, len(record.issues), target)
        self._drop_legacy(record.name)
        return target

    def _drop_legacy(self, name: str) -> None:
        legacy = self.legacy_path_for(name)
        if legacy is None:
            return
        try:
            legacy.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove old query file %s: %s", legacy, e)

    def load(self, name: str) -> Optional[WatchRecord]:
        """Return the stored record, or None when the watch does not exist.

        Raises:
            StorageError: If the file exists but cannot be read or parsed
        """
        for path in self._candidate_paths(name):
            try:
                text = path.read_text(encoding="utf-8")
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StorageError(f"Failed to read query file: {e}", path=path) from e

            try:
                return load_record(text)
            except ValueError as e:
                raise StorageError(f"Failed to parse query file: {e}", path=path) from e
        return None

    def exists(self, name: str) -> bool:
        return any(path.is_file() for path in self._candidate_paths(name))

    def delete(self, name: str) -> bool:
        """Remove a record. Missing records are not an error.

        Returns:
            True if a file was removed.

        Raises:
            StorageError: If the file exists but cannot be removed
        """
        removed = False
        for path in self._candidate_paths(name):
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as e:
                raise StorageError(f"Failed to delete query file: {e}", path=path) from e
            logger.debug("Deleted query '%s' (%s)", name, path)
            removed = True
        return removed

    # ── listing ───────────────────────────────────────────────────

    def _record_files(self) -> List[Path]:
        if not self.data_dir.is_dir():
            return []
        try:
            return sorted(
                p for p in self.data_dir.iterdir() if p.is_file() and p.suffix == _SUFFIX
            )
        except OSError as e:
            raise StorageError(f"Failed to read data directory: {e}", path=self.data_dir) from e

    def list_names(self) -> List[str]:
        """Names of all stored watches, decoded from their file names."""
        return [unslugify(p.stem) for p in self._record_files()]

    def list_all(self) -> List[WatchSummary]:
        """Summaries of every readable record; unreadable ones are skipped."""
        summaries: List[WatchSummary] = []
        for path in self._record_files():
            try:
                record = load_record(path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as e:
                logger.warning("Skipping unreadable query file %s: %s", path, e)
                continue
            summaries.append(record.summary())
        return summaries
