"""
GRAPHZ Kernel: Store Adapter

The document store is an external collaborator. This module pins down the
capabilities the gallery needs from it and ships an in-memory
implementation for tests and local runs.

Capabilities:
  subscribe(collection, order_field, direction, on_snapshot, on_error)
      push the full ordered collection on every change
  update_field(id, field, value, increment=False)
  get(id) → record dict or None

Every mutation on MemoryStore pushes a fresh full snapshot to subscribers,
the same way the hosted store's real-time listener does.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import datetime
from typing import Any

from graphz.kernel.types import now_utc, parse_timestamp

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[list[dict[str, Any]]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]

IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class StoreError(Exception):
    """A store operation was refused or the store is unreachable."""


class RecordNotFound(StoreError):
    """No record with the given id exists."""


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class GraphStore:
    """
    Abstract store interface.
    Implement against the hosted document database in production,
    or use MemoryStore for tests.
    """

    def subscribe(
        self,
        collection: str,
        order_field: str,
        direction: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        """Start receiving full snapshots. Returns a callable that stops them."""
        raise NotImplementedError

    async def update_field(self, record_id: str, field: str, value: Any, *, increment: bool = False) -> None:
        """Set one field, or add `value` to it when `increment` is True."""
        raise NotImplementedError

    async def get(self, record_id: str) -> dict[str, Any] | None:
        """Fetch one record. Returns None if not found."""
        raise NotImplementedError


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


class _Subscription:
    def __init__(
        self,
        collection: str,
        order_field: str,
        direction: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None,
    ) -> None:
        self.collection = collection
        self.order_field = order_field
        self.descending = direction.lower() == "desc"
        self.on_snapshot = on_snapshot
        self.on_error = on_error


class MemoryStore(GraphStore):
    """In-memory store for testing. One dict of records per collection."""

    def __init__(self, collection: str = "graphs") -> None:
        self.collection = collection
        self.records: dict[str, dict[str, Any]] = {}
        self._subscriptions: list[_Subscription] = []
        self._failure: Exception | None = None

    # -- subscribe --

    def subscribe(
        self,
        collection: str,
        order_field: str,
        direction: str,
        on_snapshot: SnapshotCallback,
        on_error: ErrorCallback | None = None,
    ) -> Unsubscribe:
        if direction.lower() not in ("asc", "desc"):
            raise ValueError(f"direction must be 'asc' or 'desc', got {direction!r}")
        sub = _Subscription(collection, order_field, direction, on_snapshot, on_error)
        self._subscriptions.append(sub)
        logger.debug("subscribed to %s ordered by %s %s", collection, order_field, direction)

        # Initial snapshot is delivered immediately, like a real listener.
        self._deliver(sub)

        def unsubscribe() -> None:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

        return unsubscribe

    # -- reads --

    async def get(self, record_id: str) -> dict[str, Any] | None:
        self._check_available()
        record = self.records.get(record_id)
        return dict(record) if record is not None else None

    # -- writes --

    async def create(self, data: dict[str, Any]) -> str:
        """
        Insert a new record. The store assigns id, created_at, updated_at
        and starts views at 0; any such keys in `data` are ignored.
        """
        self._check_available()
        record_id = uuid.uuid4().hex
        ts = now_utc()
        record = {k: v for k, v in data.items() if k not in ("id", "created_at", "updated_at", "views")}
        record.update(id=record_id, views=0, created_at=ts, updated_at=ts)
        self.records[record_id] = record
        self._notify()
        return record_id

    async def update(self, record_id: str, fields: dict[str, Any]) -> None:
        """Replace several editable fields at once (admin edit form)."""
        self._check_available()
        record = self._require(record_id)
        for name, value in fields.items():
            self._check_writable(record, name, value)
        record.update(fields)
        record["updated_at"] = now_utc()
        self._notify()

    async def update_field(self, record_id: str, field: str, value: Any, *, increment: bool = False) -> None:
        self._check_available()
        record = self._require(record_id)
        if increment:
            value = (record.get(field) or 0) + value
        self._check_writable(record, field, value)
        record[field] = value
        record["updated_at"] = now_utc()
        self._notify()

    async def delete(self, record_id: str) -> None:
        self._check_available()
        self._require(record_id)
        del self.records[record_id]
        self._notify()

    # -- failure simulation --

    def fail(self, error: Exception | None = None) -> None:
        """Make the store unreachable and report it to every subscriber."""
        self._failure = error or StoreError("store unavailable")
        for sub in list(self._subscriptions):
            if sub.on_error is not None:
                sub.on_error(self._failure)

    def recover(self) -> None:
        self._failure = None
        self._notify()

    # -- internals --

    def _check_available(self) -> None:
        if self._failure is not None:
            raise StoreError(str(self._failure))

    def _require(self, record_id: str) -> dict[str, Any]:
        record = self.records.get(record_id)
        if record is None:
            raise RecordNotFound(record_id)
        return record

    def _check_writable(self, record: dict[str, Any], field: str, value: Any) -> None:
        if field in IMMUTABLE_FIELDS:
            raise StoreError(f"IMMUTABLE_FIELD: {field}")
        if field == "views":
            if isinstance(value, bool) or not isinstance(value, int):
                raise StoreError(f"INVALID_VIEWS: {value!r}")
            if value < (record.get("views") or 0):
                raise StoreError(f"VIEWS_DECREASE: {record.get('views')} → {value}")

    def _ordered(self, sub: _Subscription) -> list[dict[str, Any]]:
        if sub.collection != self.collection:
            return []
        present = [r for r in self.records.values() if r.get(sub.order_field) is not None]
        missing = [r for r in self.records.values() if r.get(sub.order_field) is None]
        present.sort(key=lambda r: _order_key(r.get(sub.order_field)), reverse=sub.descending)
        # Records lacking the order field go last.
        return [dict(r) for r in present + missing]

    def _deliver(self, sub: _Subscription) -> None:
        if self._failure is not None:
            if sub.on_error is not None:
                sub.on_error(self._failure)
            return
        sub.on_snapshot(self._ordered(sub))

    def _notify(self) -> None:
        for sub in list(self._subscriptions):
            self._deliver(sub)


def _order_key(value: Any) -> Any:
    if isinstance(value, datetime | str):
        parsed = parse_timestamp(value)
        if parsed is not None:
            return (0, parsed.timestamp(), "")
    if isinstance(value, int | float) and not isinstance(value, bool):
        return (0, float(value), "")
    return (1, 0.0, str(value))


async def record_view(store: GraphStore, record_id: str) -> None:
    """
    Count one view. Called on an explicit user action (download, share),
    never on render.
    """
    if not record_id:
        logger.warning("record_view called without a record id")
        return
    await store.update_field(record_id, "views", 1, increment=True)
