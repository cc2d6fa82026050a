"""One complete recycle bin run.

A run ensures the recycle directory exists, locks it, loads and
reconciles the database, purges expired items, stages the requested
paths, and saves the database exactly once at the end.
"""

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from saferm.recycle.database import RecordMapping, RecycleDatabase
from saferm.recycle.expiration import Confirmer, ExpirationEngine
from saferm.recycle.lock import RecycleLock
from saferm.recycle.models import RunContext, RunReport, StageResult
from saferm.recycle.naming import resolve_name
from saferm.recycle.store import RecycleStore, is_reserved_name

logger = logging.getLogger(__name__)


class RecycleSession:
    """Drives the recycle bin pipeline for a single invocation.

    Attributes:
        _store: Gateway to the recycle directory.
        _database: Metadata database stored in the recycle directory.
        _engine: Expiration engine for purging expired items.
        _context: Settings fixed for this run.
    """

    def __init__(
        self,
        root: Path,
        context: RunContext,
        confirm: Confirmer | None = None,
    ) -> None:
        """Initialize the RecycleSession.

        Args:
            root: Recycle directory.
            context: Settings fixed for this run.
            confirm: Batch confirmation callback used in safe mode.
        """
        self._store = RecycleStore(root)
        self._database = RecycleDatabase(self._store)
        self._engine = ExpirationEngine(self._store, confirm)
        self._context = context

    @property
    def store(self) -> RecycleStore:
        """Gateway to the recycle directory."""
        return self._store

    def run(self, paths: Iterable[str] = (), report: RunReport | None = None) -> RunReport:
        """Run the full pipeline.

        Paths are staged in order unless the context is in no-op mode.

        Args:
            paths: Paths to move into the recycle bin.
            report: Report to record events into. Passing one keeps the
                events of a run that stops on a fatal error.

        Returns:
            RunReport with every event of the run.

        Raises:
            FatalRecycleError: If the run cannot continue.
        """
        if report is None:
            report = RunReport()
        if not os.path.lexists(self._store.root):
            report.info(f"recycle bin does not exist, creating: {self._store.root}")
        self._store.ensure_store()

        with RecycleLock(self._store.root):
            mapping = self._load()

            purge = self._engine.purge(mapping, self._context)
            report.purged = list(purge.deleted)
            report.purge_failed = list(purge.failed)
            report.purge_declined = purge.declined
            for name in purge.deleted:
                report.info(f"purged expired item: {name}")
            for name, error in purge.failed.items():
                report.warning(f"deletion failed: {self._store.path_of(name)} ({error})")
            if purge.declined:
                report.warning("purge was canceled by user.")

            if not self._context.no_op:
                for path in paths:
                    report.staged.append(self._stage(path, mapping, report))

            self._database.save(mapping)

        return report

    def inspect(self) -> RecordMapping:
        """Reconcile and save the database without purging or staging.

        Returns:
            The reconciled mapping.

        Raises:
            FatalRecycleError: If the recycle bin cannot be opened.
        """
        self._store.ensure_store()
        with RecycleLock(self._store.root):
            mapping = self._load()
            self._database.save(mapping)
        return mapping

    def _load(self) -> RecordMapping:
        return self._database.reconcile(self._database.load(), self._context.now)

    def _stage(self, path: str, mapping: RecordMapping, report: RunReport) -> StageResult:
        """Move one path into the recycle bin and track it.

        Args:
            path: Path to stage.
            mapping: Mapping updated in place on success.
            report: Report receiving events.

        Returns:
            StageResult for the path.
        """
        if not path or not os.path.lexists(path):
            report.warning(f"file path is invalid: {path}")
            return StageResult(source=path, name=None, success=False, error="Path does not exist")

        located = Path(os.path.abspath(path))
        if self._overlaps_store(located):
            report.warning(f"cannot recycle the recycle bin or its contents: {path}")
            return StageResult(
                source=path, name=None, success=False, error="Path overlaps the recycle bin"
            )

        name = self._available_name(located.name, mapping)

        try:
            result = self._store.move_in(located, name)
        except ValueError as e:
            report.warning(f"file path is invalid: {path} ({e})")
            return StageResult(source=path, name=None, success=False, error=str(e))

        if not result.success:
            report.warning(f"file was unable to be moved to recycle: {path}")
            return StageResult(source=path, name=None, success=False, error=result.error)

        mapping.put(name, self._context.now)
        report.info(f"recycled: {path} -> {self._store.path_of(name)}")
        if result.error:
            report.warning(result.error)
        return StageResult(source=path, name=name, success=True, error=result.error)

    def _available_name(self, desired: str, mapping: RecordMapping) -> str:
        """Pick a name that is neither tracked nor occupied on disk.

        The on-disk check catches entries that differ only by case on
        case-insensitive filesystems.
        """
        taken = mapping.names()
        name = desired
        while name in taken or is_reserved_name(name) or self._store.occupied(name):
            taken.add(name)
            name = resolve_name(name, taken)
        if name != desired:
            logger.debug("Name conflict for %s, using %s", desired, name)
        return name

    def _overlaps_store(self, located: Path) -> bool:
        """Check if a path is the recycle bin, inside it, or contains it."""
        root = self._store.root.resolve()
        # Resolve the parent only; a symlink is moved as a link
        real = located.parent.resolve() / located.name
        return real == root or real.is_relative_to(root) or root.is_relative_to(real)
