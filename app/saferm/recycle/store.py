"""Recycle directory gateway.

Owns the on-disk recycle bin: makes sure the directory exists, lists
its entries, moves items in, and permanently deletes items out. Every
outcome is judged by checking the filesystem afterwards rather than by
trusting the underlying call.
"""

import logging
import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from saferm.recycle.errors import ItemLostError, StoreUnavailableError

logger = logging.getLogger(__name__)

# Name of the metadata database inside the recycle directory
DATABASE_NAME = ".recycle_db"

# Temporary files written while saving the database atomically
DATABASE_TEMP_PREFIX = f"{DATABASE_NAME}."
DATABASE_TEMP_SUFFIX = ".tmp"
_DATABASE_TEMP_RE = re.compile(
    re.escape(DATABASE_TEMP_PREFIX) + r"[a-z0-9_]{8}" + re.escape(DATABASE_TEMP_SUFFIX)
)


def is_reserved_name(name: str) -> bool:
    """Check if a name belongs to the database or one of its temporary files."""
    return name == DATABASE_NAME or _DATABASE_TEMP_RE.fullmatch(name) is not None


@dataclass(frozen=True, slots=True)
class StoreActionResult:
    """Result of a single move or delete in the recycle directory.

    Attributes:
        name: Entry name inside the recycle directory.
        success: Whether the post-condition of the operation holds.
        error: Error message if the operation failed, None otherwise.
    """

    name: str
    success: bool
    error: str | None = None


class RecycleStore:
    """Gateway to the recycle directory on disk.

    Attributes:
        _root: The recycle directory.
    """

    def __init__(self, root: Path) -> None:
        """Initialize the RecycleStore.

        Args:
            root: Path of the recycle directory. It is not created here;
                call ensure_store() first.
        """
        self._root = root

    @property
    def root(self) -> Path:
        """The recycle directory."""
        return self._root

    @property
    def database_path(self) -> Path:
        """Path of the metadata database file."""
        return self._root / DATABASE_NAME

    def path_of(self, name: str) -> Path:
        """Full path of an entry in the recycle directory."""
        return self._root / name

    def ensure_store(self) -> Path:
        """Create the recycle directory if it does not exist.

        Idempotent: an existing directory is left untouched.

        Returns:
            The recycle directory path.

        Raises:
            StoreUnavailableError: If the path exists but is not a directory,
                or the directory cannot be created.
        """
        if os.path.lexists(self._root):
            if not self._root.is_dir():
                msg = f"Path already exists and is not a directory: {self._root}"
                raise StoreUnavailableError(msg)
            return self._root

        logger.info("Recycle directory does not exist, creating: %s", self._root)
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create directory {self._root}: {e}"
            raise StoreUnavailableError(msg) from e

        if not self._root.is_dir():
            msg = f"Failed to create directory: {self._root}"
            raise StoreUnavailableError(msg)
        return self._root

    def list_entries(self) -> set[str]:
        """List every direct child of the recycle directory.

        Hidden (dot) entries are included. The metadata database is
        included too; callers exclude it by name.

        Returns:
            Set of entry base names, exactly as stored on disk.

        Raises:
            StoreUnavailableError: If the directory cannot be read.
        """
        try:
            return set(os.listdir(self._root))
        except OSError as e:
            msg = f"Cannot read recycle directory {self._root}: {e}"
            raise StoreUnavailableError(msg) from e

    def occupied(self, name: str) -> bool:
        """Check if the filesystem reports an entry at the given name.

        On case-insensitive filesystems this also reports entries whose
        name differs only by case.
        """
        return os.path.lexists(self.path_of(name))

    def move_in(self, source: Path, dest_name: str) -> StoreActionResult:
        """Relocate a path into the recycle directory.

        Success means the destination exists afterwards. If the move
        failed and the source is still in place, a failure result is
        returned; nothing was lost.

        Args:
            source: Path to move.
            dest_name: Name to give the item inside the recycle directory.

        Returns:
            StoreActionResult for the destination name.

        Raises:
            ValueError: If dest_name is not a plain, unreserved entry name.
            ItemLostError: If neither the source nor the destination exists
                after the move.
        """
        self._check_name(dest_name)
        destination = self.path_of(dest_name)
        error: str | None = None

        try:
            shutil.move(str(source), str(destination))
        except OSError as e:
            error = str(e)

        dest_present = os.path.lexists(destination)
        source_present = os.path.lexists(source)

        if dest_present:
            if source_present:
                # Cross-device move copied the item but could not remove the original
                logger.warning("Original still present after move: %s", source)
                return StoreActionResult(
                    name=dest_name,
                    success=True,
                    error=f"Original could not be removed: {source}",
                )
            return StoreActionResult(name=dest_name, success=True)

        if not source_present:
            msg = f"Item lost while moving {source} to {destination}"
            raise ItemLostError(msg)

        return StoreActionResult(
            name=dest_name,
            success=False,
            error=error or f"Unable to move {source} to recycle",
        )

    def delete_recursive(self, name: str) -> StoreActionResult:
        """Permanently delete an entry from the recycle directory.

        Directories are removed with their entire contents. Symbolic
        links are removed as links; their targets are never touched.

        Args:
            name: Entry name inside the recycle directory.

        Returns:
            StoreActionResult indicating whether the entry is gone.
        """
        try:
            self._check_name(name)
        except ValueError as e:
            return StoreActionResult(name=name, success=False, error=str(e))

        target = self.path_of(name)

        try:
            # Directories (but not symlinks to directories)
            if target.is_dir() and not target.is_symlink():
                shutil.rmtree(target)
            elif os.path.lexists(target):
                target.unlink()
            else:
                return StoreActionResult(
                    name=name,
                    success=False,
                    error=f"Path does not exist: {target}",
                )
        except OSError as e:
            return StoreActionResult(name=name, success=False, error=str(e))

        if os.path.lexists(target):
            return StoreActionResult(
                name=name,
                success=False,
                error=f"Entry still present after deletion: {target}",
            )
        return StoreActionResult(name=name, success=True)

    def _check_name(self, name: str) -> None:
        """Reject names that would escape the recycle directory.

        Raises:
            ValueError: If the name is empty, a path, or reserved.
        """
        if not name or name in (".", ".."):
            msg = f"Invalid entry name: {name!r}"
            raise ValueError(msg)
        if "/" in name or os.sep in name:
            msg = f"Entry name cannot contain a path separator: {name!r}"
            raise ValueError(msg)
        if is_reserved_name(name):
            msg = f"Entry name is reserved: {name}"
            raise ValueError(msg)
