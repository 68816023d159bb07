"""
GRAPHZ Kernel: Controller Events

Every input the filter controller reacts to (UI interaction, store push,
store failure) is one of these message types. They all go through
`FilterController.dispatch`, so the event → state → recompute cycle can be
driven from tests without a UI.

`make_event` builds them from a type name + payload, mirroring how the
page wires DOM events to the controller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SetFilter:
    """Replace one Filter State field."""

    field: str
    value: Any


@dataclass(frozen=True)
class ToggleTag:
    tag: str


@dataclass(frozen=True)
class QueryInput:
    """A keystroke in the search box. Recompute is debounced."""

    text: str


@dataclass(frozen=True)
class ClearQuery:
    """Escape / clear button on the search box. Bypasses the debounce."""


@dataclass(frozen=True)
class ClearAll:
    pass


@dataclass(frozen=True)
class SnapshotReceived:
    """A full push of the current collection from the store."""

    records: tuple[Any, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SubscriptionFailed:
    error: Exception | str


ControllerEvent = SetFilter | ToggleTag | QueryInput | ClearQuery | ClearAll | SnapshotReceived | SubscriptionFailed


EVENT_TYPES: dict[str, type] = {
    "filter.set": SetFilter,
    "tag.toggle": ToggleTag,
    "query.input": QueryInput,
    "query.clear": ClearQuery,
    "filters.clear": ClearAll,
    "snapshot.received": SnapshotReceived,
    "snapshot.failed": SubscriptionFailed,
}


def make_event(type: str, **payload: Any) -> ControllerEvent:
    """
    Build an event from its type name.

        make_event("filter.set", field="subject", value="math")
        make_event("query.input", text="tre")
        make_event("snapshot.received", records=[...])
    """
    cls = EVENT_TYPES.get(type)
    if cls is None:
        raise ValueError(f"UNKNOWN_EVENT: {type}")
    if cls is SnapshotReceived and "records" in payload:
        payload = {**payload, "records": tuple(payload["records"])}
    try:
        return cls(**payload)
    except TypeError as e:
        raise ValueError(f"BAD_PAYLOAD for {type}: {e}") from e
