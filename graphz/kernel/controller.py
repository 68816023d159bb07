"""
GRAPHZ Kernel: Filter State Controller

Owns the single authoritative FilterState and the canonical (unfiltered)
record collection. Coordinates filter engine + renderer.

Cycle: event → new state / new snapshot → recompute → render + count

Rules:
- Recompute always runs against the latest state and the latest snapshot.
  Both are read at recompute time, never captured earlier.
- Free-text input is debounced. Any immediate recompute supersedes a
  pending debounced one, because it already reflects the latest query.
- The count handed to the renderer is always len() of what was rendered.
- Nothing here is persisted; state lives for the page session.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from graphz.config import settings
from graphz.kernel.debounce import Debouncer
from graphz.kernel.events import (
    ClearAll,
    ClearQuery,
    ControllerEvent,
    QueryInput,
    SetFilter,
    SnapshotReceived,
    SubscriptionFailed,
    ToggleTag,
)
from graphz.kernel.filters import apply_filters
from graphz.kernel.renderer import LOAD_ERROR_MESSAGE, Renderer, SearchIndex, build_search_index
from graphz.kernel.store import GraphStore, Unsubscribe
from graphz.kernel.types import FilterState, Record

logger = logging.getLogger(__name__)


class FilterController:
    """
    Holds filter state + canonical records and keeps the view in sync.

    All mutation goes through `dispatch` (or the named methods it routes
    to). Reads go through the read-only properties.
    """

    def __init__(
        self,
        renderer: Renderer,
        *,
        debounce_seconds: float | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        if debounce_seconds is None:
            debounce_seconds = settings.SEARCH_DEBOUNCE_MS / 1000
        self._renderer = renderer
        self._state = FilterState()
        self._records: tuple[Record, ...] = ()
        self._results: tuple[Record, ...] = ()
        self._error: str | None = None
        self._clock = clock
        self._debouncer = Debouncer(debounce_seconds, self._recompute, loop=loop)
        self._unsubscribe: Unsubscribe | None = None
        self.recompute_count = 0

        self._handlers: dict[type, Callable[[Any], None]] = {
            SetFilter: lambda e: self.set_filter(e.field, e.value),
            ToggleTag: lambda e: self.toggle_tag(e.tag),
            QueryInput: lambda e: self.on_query_input(e.text),
            ClearQuery: lambda e: self.clear_query(),
            ClearAll: lambda e: self.clear_all(),
            SnapshotReceived: lambda e: self.on_snapshot(e.records),
            SubscriptionFailed: lambda e: self.on_subscription_error(e.error),
        }

    # -- read-only accessors --

    @property
    def state(self) -> FilterState:
        return self._state

    @property
    def records(self) -> tuple[Record, ...]:
        return self._records

    @property
    def results(self) -> tuple[Record, ...]:
        return self._results

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    @property
    def search_index(self) -> SearchIndex:
        return build_search_index(self._records)

    # -- dispatch --

    def dispatch(self, event: ControllerEvent) -> None:
        """Single entry point for UI and store events."""
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"UNKNOWN_EVENT: {type(event).__name__}")
        handler(event)

    # -- filter state --

    def set_filter(self, field: str, value: Any) -> None:
        """
        Replace one state field and recompute.
        Raises ValueError for an unknown field or out-of-range value;
        the current state is left untouched in that case.
        """
        self._state = self._state.with_field(field, value)
        self._recompute_now()

    def toggle_tag(self, tag: str) -> None:
        self._state = self._state.with_tag_toggled(tag)
        self._recompute_now()

    def on_query_input(self, text: str) -> None:
        """Record the query now; recompute once typing settles."""
        self._state = self._state.with_field("query", text)
        self._debouncer.schedule()

    def clear_query(self) -> None:
        """Escape action: drop pending work, clear the query, recompute now."""
        self._debouncer.cancel()
        self._state = self._state.with_field("query", "")
        self._recompute_now()

    def clear_all(self) -> None:
        self._debouncer.cancel()
        self._state = FilterState()
        self._recompute_now()

    # -- store --

    def on_snapshot(self, records: Iterable[Record | dict[str, Any]]) -> None:
        """Replace the canonical collection and re-run the current state on it."""
        self._records = tuple(r if isinstance(r, Record) else Record.from_dict(r) for r in records)
        self._error = None
        logger.debug("snapshot received: %d records", len(self._records))
        self._recompute_now()

    def on_subscription_error(self, error: Exception | str) -> None:
        logger.error("graph subscription failed: %s", error)
        self._debouncer.cancel()
        self._error = LOAD_ERROR_MESSAGE
        self._renderer.render_error(LOAD_ERROR_MESSAGE)

    def connect(
        self,
        store: GraphStore,
        *,
        collection: str | None = None,
        order_field: str | None = None,
        direction: str | None = None,
    ) -> Unsubscribe:
        """Subscribe to the store; each push and failure is dispatched as an event."""
        self.disconnect()
        self._unsubscribe = store.subscribe(
            collection or settings.COLLECTION,
            order_field or settings.ORDER_FIELD,
            direction or settings.ORDER_DIRECTION,
            lambda records: self.dispatch(SnapshotReceived(tuple(records))),
            lambda error: self.dispatch(SubscriptionFailed(error)),
        )
        return self._unsubscribe

    def disconnect(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._debouncer.cancel()

    # -- recompute --

    def _recompute_now(self) -> None:
        self._debouncer.cancel()
        self._recompute()

    def _recompute(self) -> None:
        if self._error is not None:
            # The error view stays until a fresh snapshot arrives.
            return
        now = self._clock() if self._clock else None
        results = apply_filters(self._records, self._state, now=now)
        self._results = results
        self.recompute_count += 1
        logger.debug("recompute #%d: %s → %d of %d", self.recompute_count, self._state, len(results), len(self._records))
        self._renderer.render(results)
        self._renderer.update_count(len(results))
