"""Recycle bin domain models.

This module defines the data structures shared by the recycle bin
components: database records, run context, reported events, and the
results of staging and purging.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

SECONDS_PER_DAY = 24 * 60 * 60


def cutoff_timestamp(now: int, window_days: int) -> int:
    """Timestamp at or before which an item is expired."""
    return now - window_days * SECONDS_PER_DAY


class EventKind(str, Enum):
    """Severity of a reported event.

    Attributes:
        INFO: Informational message.
        WARNING: Recoverable problem; the run continues.
        FATAL: Non-recoverable problem; the run stops.
    """

    INFO = "info"
    WARNING = "warning"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class RecycleEvent:
    """Message produced while staging or purging an item.

    Attributes:
        kind: Severity of the event.
        message: Human-readable description.
    """

    kind: EventKind
    message: str

    @property
    def is_warning(self) -> bool:
        """Check if this event reports a recoverable problem."""
        return self.kind == EventKind.WARNING


@dataclass(frozen=True, slots=True)
class RecycleRecord:
    """A single tracked item in the recycle bin.

    Attributes:
        name: Exact base name of the entry in the recycle directory.
        arrival_timestamp: Unix timestamp (seconds) when the item arrived.
    """

    name: str
    arrival_timestamp: int

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.name:
            msg = "Record name cannot be empty"
            raise ValueError(msg)
        if "/" in self.name:
            msg = f"Record name cannot contain '/': {self.name!r}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class RunContext:
    """Per-invocation settings threaded through every component.

    Attributes:
        now: Unix timestamp (seconds) fixed for the whole run.
        retention_days: Days before a staged item expires.
        safe_mode: Require a batch confirmation before purging.
        no_op: Run maintenance only, skipping the stage-in step.
    """

    now: int
    retention_days: int
    safe_mode: bool = False
    no_op: bool = False

    def __post_init__(self) -> None:
        """Validate context data after initialization."""
        if self.retention_days < 0:
            msg = f"Retention window cannot be negative, got {self.retention_days}"
            raise ValueError(msg)

    @property
    def expiry_cutoff(self) -> int:
        """Timestamp at or before which an item is expired."""
        return cutoff_timestamp(self.now, self.retention_days)


@dataclass(frozen=True, slots=True)
class StageResult:
    """Result of moving one path into the recycle bin.

    Attributes:
        source: Path that was requested for staging.
        name: Name the item received in the recycle bin (None on failure).
        success: Whether the item is now in the recycle bin.
        error: Error message if the operation failed, None otherwise.
    """

    source: str
    name: str | None
    success: bool
    error: str | None = None

    @property
    def renamed(self) -> bool:
        """Check if the item was renamed to avoid a collision."""
        if self.name is None:
            return False
        return self.name != Path(self.source).name


@dataclass(slots=True)
class RunReport:
    """Outcome of one complete recycle bin run.

    Attributes:
        events: Every event reported during the run, in order.
        staged: Results of each requested stage-in.
        purged: Names permanently deleted during the run.
        purge_failed: Expired names whose deletion failed.
        purge_declined: Whether the user declined the purge in safe mode.
    """

    events: list[RecycleEvent] = field(default_factory=list)
    staged: list[StageResult] = field(default_factory=list)
    purged: list[str] = field(default_factory=list)
    purge_failed: list[str] = field(default_factory=list)
    purge_declined: bool = False

    def info(self, message: str) -> None:
        """Record an informational event."""
        self.events.append(RecycleEvent(EventKind.INFO, message))

    def warning(self, message: str) -> None:
        """Record a recoverable problem."""
        self.events.append(RecycleEvent(EventKind.WARNING, message))

    def fatal(self, message: str) -> None:
        """Record the problem that stopped the run."""
        self.events.append(RecycleEvent(EventKind.FATAL, message))

    @property
    def has_warnings(self) -> bool:
        """Check if any recoverable problem was reported."""
        return any(e.is_warning for e in self.events)
