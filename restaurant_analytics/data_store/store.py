from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

import pandas as pd

from ..errors import LoadError
from .config import DEFAULT_DATA_STORE_CONFIG, DataStoreConfig
from .loader import load_records

logger = logging.getLogger(__name__)

Loader = Callable[[], tuple[pd.DataFrame, pd.DataFrame]]
Clock = Callable[[], float]


@dataclass(frozen=True)
class Snapshot:
    """One consistent, read-only view of all records as of ``loaded_at``."""

    restaurants: pd.DataFrame
    orders: pd.DataFrame
    loaded_at: float


class RecordStore:
    """
    Holds the current snapshot and replaces it once it is older than the TTL.

    A reload builds a complete new ``Snapshot`` and swaps the reference in a
    single assignment, so readers see either the old or the new snapshot.
    Reloads are serialised by a lock; a reader that waited on the lock
    re-checks freshness before loading again.
    """

    def __init__(
        self,
        loader: Loader,
        ttl_seconds: float = 300,
        clock: Clock = time.time,
    ) -> None:
        self._loader = loader
        self._ttl = ttl_seconds
        self._clock = clock
        self._snapshot: Snapshot | None = None
        self._lock = threading.Lock()
        self._reloads = 0
        self._failed_reloads = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _is_stale(self, snapshot: Snapshot | None) -> bool:
        return snapshot is None or self._clock() - snapshot.loaded_at >= self._ttl

    def _reload(self) -> Snapshot:
        try:
            restaurants, orders = self._loader()
        except LoadError:
            self._failed_reloads += 1
            logger.warning("Snapshot reload failed, keeping previous snapshot", exc_info=True)
            raise
        snapshot = Snapshot(restaurants=restaurants, orders=orders, loaded_at=self._clock())
        self._snapshot = snapshot
        self._reloads += 1
        logger.info(
            "Snapshot reloaded (%d restaurants, %d orders)", len(restaurants), len(orders)
        )
        return snapshot

    def snapshot(self) -> Snapshot:
        """Return a fresh snapshot, reloading if the current one has expired."""
        current = self._snapshot
        if not self._is_stale(current):
            return current
        with self._lock:
            current = self._snapshot
            if not self._is_stale(current):
                return current
            return self._reload()

    def refresh(self) -> Snapshot:
        """Force a reload regardless of the snapshot's age."""
        with self._lock:
            return self._reload()

    def get_restaurants(self) -> pd.DataFrame:
        return self.snapshot().restaurants

    def get_orders(self) -> pd.DataFrame:
        return self.snapshot().orders

    def stats(self) -> dict[str, Any]:
        current = self._snapshot
        return {
            "loaded_at": current.loaded_at if current else None,
            "age_seconds": round(self._clock() - current.loaded_at, 1) if current else None,
            "ttl_seconds": self._ttl,
            "reloads": self._reloads,
            "failed_reloads": self._failed_reloads,
            "restaurant_count": len(current.restaurants) if current else 0,
            "order_count": len(current.orders) if current else 0,
        }


_store: RecordStore | None = None
_store_lock = threading.Lock()


def create_store(config: DataStoreConfig = DEFAULT_DATA_STORE_CONFIG) -> RecordStore:
    return RecordStore(lambda: load_records(config), ttl_seconds=config.ttl_seconds)


def get_store() -> RecordStore:
    """Return the process-wide record store, creating it on first call."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                _store = create_store()
    return _store
