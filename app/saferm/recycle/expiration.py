"""Expiration of items that have outlived the retention window.

The engine runs through COMPUTING, an optional AWAITING_CONFIRMATION
step in safe mode, DELETING, and finally DONE. A declined confirmation
leaves every record untouched; a failed deletion keeps its record so the
item is reconsidered on the next run.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from saferm.recycle.database import RecordMapping
from saferm.recycle.models import RunContext, cutoff_timestamp
from saferm.recycle.store import RecycleStore

logger = logging.getLogger(__name__)


class PurgeState(str, Enum):
    """Stage of the expiration engine."""

    COMPUTING = "computing"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    DELETING = "deleting"
    DONE = "done"


class Confirmer(Protocol):
    """Approves or rejects a batch of expired items as a whole."""

    def __call__(self, batch: list[str]) -> bool: ...


@dataclass(slots=True)
class PurgeReport:
    """Outcome of one purge.

    Attributes:
        expired: Names that were past their expiration.
        deleted: Names deleted and verified absent.
        failed: Names whose deletion failed, mapped to the error.
        declined: Whether the confirmation was refused.
        state: Final engine state.
    """

    expired: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)
    declined: bool = False
    state: PurgeState = PurgeState.COMPUTING


def compute_expired(mapping: RecordMapping, now: int, window_days: int) -> set[str]:
    """Find tracked names that are past the retention window.

    An item arriving exactly at the cutoff is expired.

    Args:
        mapping: Reconciled name to arrival timestamp mapping.
        now: Current Unix timestamp.
        window_days: Retention window in days.

    Returns:
        Set of expired names.
    """
    cutoff = cutoff_timestamp(now, window_days)
    expired: set[str] = set()
    for name in mapping:
        timestamp = mapping.get(name)
        if timestamp is not None and timestamp <= cutoff:
            expired.add(name)
    return expired


def _always_confirm(batch: list[str]) -> bool:
    return True


class ExpirationEngine:
    """Permanently deletes expired items from the recycle bin.

    Attributes:
        _store: Gateway used for deletion and verification.
        _confirm: Collaborator asked once per batch in safe mode.
    """

    def __init__(self, store: RecycleStore, confirm: Confirmer | None = None) -> None:
        """Initialize the ExpirationEngine.

        Args:
            store: Gateway to the recycle directory.
            confirm: Batch confirmation callback used in safe mode. Defaults
                to approving every batch.
        """
        self._store = store
        self._confirm: Confirmer = confirm or _always_confirm

    def purge(self, mapping: RecordMapping, context: RunContext) -> PurgeReport:
        """Delete every expired item and drop its record.

        The mapping is modified in place, and only for deletions that
        are verified against a fresh directory listing.

        Args:
            mapping: Reconciled mapping; updated in place.
            context: Run context providing now, window, and safe mode.

        Returns:
            PurgeReport describing what happened.
        """
        report = PurgeReport()
        expired = sorted(compute_expired(mapping, context.now, context.retention_days))
        report.expired = expired

        if not expired:
            report.state = PurgeState.DONE
            return report

        if context.safe_mode:
            report.state = PurgeState.AWAITING_CONFIRMATION
            if not self._confirm(expired):
                logger.info("Purge of %d item(s) declined", len(expired))
                report.declined = True
                report.state = PurgeState.DONE
                return report

        report.state = PurgeState.DELETING
        self._delete_all(expired, mapping, report)
        report.state = PurgeState.DONE
        return report

    def _delete_all(
        self,
        names: Iterable[str],
        mapping: RecordMapping,
        report: PurgeReport,
    ) -> None:
        """Delete names one by one, isolating failures per name."""
        for name in names:
            result = self._store.delete_recursive(name)
            # Re-check against the listing rather than trusting the result
            still_present = name in self._store.list_entries()

            if still_present:
                error = result.error or f"Entry still present after deletion: {name}"
                logger.warning("Deletion failed for %s: %s", name, error)
                report.failed[name] = error
                continue

            if not result.success:
                # Entry is gone even though the call reported a problem
                logger.debug("Entry %s absent despite error: %s", name, result.error)

            mapping.discard(name)
            report.deleted.append(name)
