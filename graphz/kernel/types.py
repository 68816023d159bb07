"""
GRAPHZ Kernel: Shared Types

Data classes used across the filter engine, controller, store and renderer.
These are the contracts that bind the kernel together.

Records arrive from the document store as loose dicts. `Record.from_dict`
is the single place where missing or malformed optional fields are
defaulted, so nothing downstream needs ad hoc None checks:

- views      absent / negative / fractional  → 0 (12.0 is kept as 12)
- tags       absent / not a list             → []
- alias      absent                          → ""
- source     absent                          → ""
- created_at missing / unparseable           → None
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

SUBJECTS: tuple[str, ...] = ("math", "physics", "chemistry", "bio", "cs", "other")

ALL = "all"

DATE_RANGES: tuple[str, ...] = (ALL, "week", "month", "year")

SORT_KEYS: tuple[str, ...] = ("newest", "oldest", "mostViews", "leastViews", "name")

DEFAULT_SORT = "newest"

FILTER_FIELDS: tuple[str, ...] = ("query", "subject", "tags", "date_range", "min_views", "sort_by")


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Record:
    """
    A "graph": one displayable catalog item.

    `tags` keeps display order; filtering treats it as a set.
    """

    id: str
    name: str
    description: str
    subject: str
    image_url: str = ""
    alias: str = ""
    source: str = ""
    tags: tuple[str, ...] = ()
    views: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "alias": self.alias,
            "description": self.description,
            "subject": self.subject,
            "tags": list(self.tags),
            "image_url": self.image_url,
            "source": self.source,
            "views": self.views,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Record:
        tags = d.get("tags")
        if not isinstance(tags, list | tuple):
            tags = []
        views = _coerce_views(d.get("views"))
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name") or ""),
            alias=str(d.get("alias") or ""),
            description=str(d.get("description") or ""),
            subject=str(d.get("subject") or ""),
            tags=tuple(str(t) for t in tags),
            image_url=str(d.get("image_url") or d.get("imageUrl") or ""),
            source=str(d.get("source") or ""),
            views=views,
            created_at=parse_timestamp(d.get("created_at", d.get("createdAt"))),
            updated_at=parse_timestamp(d.get("updated_at", d.get("updatedAt"))),
        )


@dataclass(frozen=True)
class FilterState:
    """
    The active search / filter / sort selections.

    A value object: no identity beyond its fields. Construct a new one
    with `with_field` instead of mutating.
    """

    query: str = ""
    subject: str = ALL
    tags: frozenset[str] = field(default_factory=frozenset)
    date_range: str = ALL
    min_views: int = 0
    sort_by: str = DEFAULT_SORT

    def __post_init__(self) -> None:
        if isinstance(self.tags, str):
            raise ValueError("tags must be a collection of strings, not a single string")
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", frozenset(self.tags))
        if not isinstance(self.query, str):
            raise ValueError(f"query must be a string, got {self.query!r}")
        if self.subject != ALL and self.subject not in SUBJECTS:
            raise ValueError(f"unknown subject: {self.subject!r}")
        if self.date_range not in DATE_RANGES:
            raise ValueError(f"unknown date range: {self.date_range!r}")
        if self.sort_by not in SORT_KEYS:
            raise ValueError(f"unknown sort key: {self.sort_by!r}")
        if isinstance(self.min_views, bool) or not isinstance(self.min_views, int) or self.min_views < 0:
            raise ValueError(f"min_views must be a non-negative int, got {self.min_views!r}")

    def with_field(self, name: str, value: Any) -> FilterState:
        if name not in FILTER_FIELDS:
            raise ValueError(f"unknown filter field: {name!r}")
        return replace(self, **{name: value})

    def with_tag_toggled(self, tag: str) -> FilterState:
        if tag in self.tags:
            return replace(self, tags=self.tags - {tag})
        return replace(self, tags=self.tags | {tag})


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def parse_timestamp(value: Any) -> datetime | None:
    """
    Coerce a store timestamp to an aware UTC datetime.

    Accepts datetime, ISO 8601 strings (a trailing "Z" is allowed) and epoch
    seconds. Anything else, including an unparseable string, yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, int | float):
        try:
            dt = datetime.fromtimestamp(value, UTC)
        except (OverflowError, OSError, ValueError):
            logger.debug("unparseable epoch timestamp: %r", value)
            return None
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            logger.debug("unparseable timestamp string: %r", value)
            return None
    else:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def _coerce_views(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        value = int(value)
    if not isinstance(value, int) or value < 0:
        return 0
    return value


def now_utc() -> datetime:
    """Current UTC time as an aware datetime."""
    return datetime.now(UTC)
