"""Exceptions raised by the recycle bin core.

Fatal errors abort the run with a non-zero exit status. Everything that
can be recovered from is reported as a warning event instead of raised.
"""


class RecycleError(Exception):
    """Base exception for recycle bin errors."""


class FatalRecycleError(RecycleError):
    """Raised when the run cannot continue."""


class StoreUnavailableError(FatalRecycleError):
    """Raised when the recycle directory cannot be created or is not a directory."""


class DatabaseUnavailableError(FatalRecycleError):
    """Raised when the metadata database cannot be created or written."""


class LockHeldError(FatalRecycleError):
    """Raised when another invocation holds the recycle bin lock."""


class ItemLostError(FatalRecycleError):
    """Raised when a move leaves neither the source nor the destination in place."""
