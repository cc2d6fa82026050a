"""Recycle bin core.

This module provides the recycle directory gateway, the metadata
database and its reconciliation, collision-free naming, the expiration
engine, and the session that runs them in order.
"""

from saferm.recycle.database import RecordMapping, RecycleDatabase
from saferm.recycle.errors import (
    DatabaseUnavailableError,
    FatalRecycleError,
    ItemLostError,
    LockHeldError,
    RecycleError,
    StoreUnavailableError,
)
from saferm.recycle.expiration import (
    Confirmer,
    ExpirationEngine,
    PurgeReport,
    PurgeState,
    compute_expired,
)
from saferm.recycle.lock import RecycleLock
from saferm.recycle.models import (
    EventKind,
    RecycleEvent,
    RecycleRecord,
    RunContext,
    RunReport,
    StageResult,
    cutoff_timestamp,
)
from saferm.recycle.naming import resolve_name
from saferm.recycle.session import RecycleSession
from saferm.recycle.store import (
    DATABASE_NAME,
    RecycleStore,
    StoreActionResult,
    is_reserved_name,
)

__all__ = [
    "DATABASE_NAME",
    "Confirmer",
    "DatabaseUnavailableError",
    "EventKind",
    "ExpirationEngine",
    "FatalRecycleError",
    "ItemLostError",
    "LockHeldError",
    "PurgeReport",
    "PurgeState",
    "RecordMapping",
    "RecycleDatabase",
    "RecycleError",
    "RecycleEvent",
    "RecycleLock",
    "RecycleRecord",
    "RecycleSession",
    "RecycleStore",
    "RunContext",
    "RunReport",
    "StageResult",
    "StoreActionResult",
    "StoreUnavailableError",
    "compute_expired",
    "cutoff_timestamp",
    "is_reserved_name",
    "resolve_name",
]
