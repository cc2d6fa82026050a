"""Metadata database for the recycle bin.

The database maps each item in the recycle directory to the time it
arrived. It lives inside the recycle directory as a plain text file
with one ``name/timestamp/`` line per item, and is replaced atomically
on every save. Backslashes and line breaks in names are written as
``\\\\``, ``\\n`` and ``\\r`` so that every record stays on one line.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from tempfile import NamedTemporaryFile

from saferm.recycle.errors import DatabaseUnavailableError
from saferm.recycle.models import RecycleRecord
from saferm.recycle.store import (
    DATABASE_TEMP_PREFIX,
    DATABASE_TEMP_SUFFIX,
    RecycleStore,
    is_reserved_name,
)

logger = logging.getLogger(__name__)

FIELD_DELIMITER = "/"

ESCAPE_CHAR = "\\"
_ESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}
_UNESCAPES = {char: code for code, char in _ESCAPES.items()}


class RecordMapping:
    """Name to arrival timestamp mapping for one run.

    Keys are compared exactly (case-sensitive), independent of how the
    underlying filesystem treats case. Iteration order is not defined.
    """

    def __init__(self, records: dict[str, int] | None = None) -> None:
        self._records: dict[str, int] = dict(records) if records else {}

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RecordMapping):
            return NotImplemented
        return self._records == other._records

    def __repr__(self) -> str:
        return f"RecordMapping({self._records!r})"

    def get(self, name: str) -> int | None:
        """Arrival timestamp of a tracked name, or None."""
        return self._records.get(name)

    def put(self, name: str, timestamp: int) -> None:
        """Track a name, replacing any previous timestamp."""
        self._records[name] = timestamp

    def discard(self, name: str) -> bool:
        """Stop tracking a name.

        Returns:
            True if the name was tracked.
        """
        return self._records.pop(name, None) is not None

    def names(self) -> set[str]:
        """All tracked names."""
        return set(self._records)

    def records(self) -> list[RecycleRecord]:
        """All tracked records."""
        return [RecycleRecord(name, ts) for name, ts in self._records.items()]

    def copy(self) -> "RecordMapping":
        """Independent copy of this mapping."""
        return RecordMapping(self._records)


def escape_name(name: str) -> str:
    """Escape backslashes and line breaks so a name fits on one line."""
    return "".join(
        ESCAPE_CHAR + _UNESCAPES[char] if char in _UNESCAPES else char for char in name
    )


def unescape_name(text: str) -> str | None:
    """Reverse escape_name.

    Returns:
        The original name, or None if the text holds an unknown or
        unterminated escape sequence.
    """
    chars: list[str] = []
    pending = False
    for char in text:
        if pending:
            if char not in _ESCAPES:
                return None
            chars.append(_ESCAPES[char])
            pending = False
        elif char == ESCAPE_CHAR:
            pending = True
        else:
            chars.append(char)
    if pending:
        return None
    return "".join(chars)


def parse_line(line: str) -> RecycleRecord | None:
    """Parse one database line of the form ``name/timestamp/``.

    The trailing delimiter is optional when reading. Lines that cannot
    be parsed return None.

    Args:
        line: Raw line without its newline.

    Returns:
        The parsed record, or None if the line is malformed.
    """
    parts = line.split(FIELD_DELIMITER)
    if len(parts) < 2:
        return None
    raw_name, raw_timestamp = parts[0], parts[1].strip()
    # Anything after the second delimiter must be empty
    if any(p.strip() for p in parts[2:]):
        return None
    name = unescape_name(raw_name)
    if not name or is_reserved_name(name):
        return None
    try:
        timestamp = int(raw_timestamp)
    except ValueError:
        return None
    return RecycleRecord(name=name, arrival_timestamp=timestamp)


def format_record(record: RecycleRecord) -> str:
    """Format a record as a database line (without newline)."""
    return (
        f"{escape_name(record.name)}{FIELD_DELIMITER}"
        f"{record.arrival_timestamp}{FIELD_DELIMITER}"
    )


class RecycleDatabase:
    """Loads, reconciles, and saves the recycle bin metadata.

    Storage location: <recycle dir>/.recycle_db

    Attributes:
        _store: Gateway to the recycle directory that holds the database.
    """

    def __init__(self, store: RecycleStore) -> None:
        """Initialize RecycleDatabase.

        Args:
            store: Gateway to the recycle directory.
        """
        self._store = store

    @property
    def path(self) -> Path:
        """Path to the database file."""
        return self._store.database_path

    def load(self) -> RecordMapping:
        """Read the database into a mapping.

        Creates an empty database file when none exists. Malformed lines
        are skipped with a warning; a name appearing twice keeps the last
        timestamp read.

        Returns:
            Mapping of every well-formed record.

        Raises:
            DatabaseUnavailableError: If the file is missing and cannot be
                created, or cannot be read.
        """
        mapping = RecordMapping()

        if not self.path.exists():
            logger.info("Database does not exist, creating: %s", self.path)
            try:
                self.path.touch()
            except OSError as e:
                msg = f"Failed to create database {self.path}: {e}"
                raise DatabaseUnavailableError(msg) from e
            if not self.path.is_file():
                msg = f"Failed to create database: {self.path}"
                raise DatabaseUnavailableError(msg)
            return mapping

        try:
            with self.path.open(encoding="utf-8", errors="surrogateescape", newline="\n") as f:
                for line_num, line in enumerate(f, start=1):
                    line = line.rstrip("\n")
                    if not line:
                        continue

                    record = parse_line(line)
                    if record is None:
                        logger.warning("Skipping malformed database line %d: %r", line_num, line)
                        continue
                    mapping.put(record.name, record.arrival_timestamp)
        except OSError as e:
            msg = f"Failed to read database {self.path}: {e}"
            raise DatabaseUnavailableError(msg) from e

        return mapping

    def reconcile(self, mapping: RecordMapping, now: int) -> RecordMapping:
        """Align a mapping with the actual contents of the recycle directory.

        Records for entries that no longer exist are dropped. Entries that
        have no record are adopted with the current time as their arrival.
        Membership is decided by exact name comparison against the
        directory listing, never by a filesystem existence check.

        Args:
            mapping: Mapping as loaded from the database.
            now: Current Unix timestamp for newly adopted entries.

        Returns:
            A new mapping whose names equal the directory entries, minus
            the database and its temporary files.
        """
        actual = {name for name in self._store.list_entries() if not is_reserved_name(name)}
        result = mapping.copy()

        for name in mapping:
            if name not in actual:
                logger.debug("Dropping stale record: %s", name)
                result.discard(name)

        for name in actual:
            if name not in result:
                logger.debug("Adopting untracked entry: %s", name)
                result.put(name, now)

        return result

    def save(self, mapping: RecordMapping) -> None:
        """Replace the database with the given mapping.

        The records are written to a temporary file in the recycle
        directory, which then replaces the database with os.replace().
        A failed save leaves the previous database intact. If the
        recycle directory has disappeared, it is recreated first.

        Args:
            mapping: Mapping to persist.

        Raises:
            StoreUnavailableError: If the recycle directory cannot be recreated.
            DatabaseUnavailableError: If the file cannot be written.
        """
        if not self._store.root.is_dir():
            logger.warning("Recycle directory vanished, recreating: %s", self._store.root)
            self._store.ensure_store()
        else:
            self._remove_stale_temp_files()

        lines = [format_record(record) + "\n" for record in mapping.records()]
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                errors="surrogateescape",
                newline="\n",
                dir=self._store.root,
                prefix=DATABASE_TEMP_PREFIX,
                suffix=DATABASE_TEMP_SUFFIX,
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                f.writelines(lines)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            msg = f"Failed to write database {self.path}: {e}"
            raise DatabaseUnavailableError(msg) from e

    def _remove_stale_temp_files(self) -> None:
        """Remove temporary files left behind by an interrupted save."""
        for name in self._store.list_entries():
            if name == self.path.name or not is_reserved_name(name):
                continue
            logger.debug("Removing stale database temp file: %s", name)
            try:
                self._store.path_of(name).unlink()
            except OSError as e:
                logger.warning("Cannot remove stale database temp file %s: %s", name, e)
