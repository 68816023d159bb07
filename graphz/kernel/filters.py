"""
GRAPHZ Kernel: Filter Engine

Pure function: (records, filter_state) → ordered tuple of records
No side effects. No IO. Deterministic for a fixed `now`.

Stages run in a fixed order and each one only narrows the candidate set:

  query → subject → tags → date range → min views → sort

Every stage is skipped when its field holds the default ("all", empty, 0),
so `apply_filters(records, FilterState())` is just the default sort.

Malformed optional fields never raise here. They were already defaulted
by `Record.from_dict`; the rules for what a default means per stage live
next to each stage below.
"""

from __future__ import annotations

import calendar
import locale
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any

from graphz.kernel.types import ALL, FilterState, Record, now_utc, parse_timestamp

# Missing timestamps sort as the oldest possible value.
_OLDEST = datetime.min.replace(tzinfo=UTC)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def apply_filters(
    records: Iterable[Record | dict[str, Any]],
    state: FilterState,
    *,
    now: datetime | None = None,
) -> tuple[Record, ...]:
    """
    Apply every active filter in `state` to `records`, then sort.

    Returns a new tuple. The input collection is never modified.
    Raw dicts are accepted and decoded with `Record.from_dict`.
    """
    candidates = [r if isinstance(r, Record) else Record.from_dict(r) for r in records]

    candidates = filter_by_query(candidates, state.query)
    candidates = filter_by_subject(candidates, state.subject)
    candidates = filter_by_tags(candidates, state.tags)
    candidates = filter_by_date_range(candidates, state.date_range, now=now)
    candidates = filter_by_min_views(candidates, state.min_views)

    return tuple(sort_records(candidates, state.sort_by))


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def filter_by_query(records: list[Record], query: str) -> list[Record]:
    """
    Case-insensitive substring search over name, alias, subject,
    description and tags. A record matches if ANY of them contains the query.
    """
    term = query.strip().casefold()
    if not term:
        return records
    return [r for r in records if _matches_query(r, term)]


def filter_by_subject(records: list[Record], subject: str) -> list[Record]:
    if subject == ALL:
        return records
    return [r for r in records if r.subject == subject]


def filter_by_tags(records: list[Record], tags: frozenset[str]) -> list[Record]:
    """Keep records carrying at least one of the selected tags (OR)."""
    if not tags:
        return records
    return [r for r in records if not tags.isdisjoint(r.tags)]


def filter_by_date_range(
    records: list[Record],
    date_range: str,
    *,
    now: datetime | None = None,
) -> list[Record]:
    """
    Keep records created on or after the bucket's cutoff.

    Once active, records without a created_at are excluded. A naive `now`
    is taken as UTC.
    """
    if date_range == ALL:
        return records
    cutoff = date_range_cutoff(date_range, parse_timestamp(now) or now_utc())
    return [r for r in records if r.created_at is not None and r.created_at >= cutoff]


def filter_by_min_views(records: list[Record], min_views: int) -> list[Record]:
    if min_views <= 0:
        return records
    return [r for r in records if r.views >= min_views]


def sort_records(records: list[Record], sort_by: str) -> list[Record]:
    """
    Stable sort by the given key. Equal keys keep their incoming order,
    which is the store's own order (newest first by default).
    """
    if sort_by == "newest":
        return sorted(records, key=_created_key, reverse=True)
    if sort_by == "oldest":
        return sorted(records, key=_created_key)
    if sort_by == "mostViews":
        return sorted(records, key=lambda r: r.views, reverse=True)
    if sort_by == "leastViews":
        return sorted(records, key=lambda r: r.views)
    if sort_by == "name":
        return sorted(records, key=_name_key)
    return list(records)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _matches_query(record: Record, term: str) -> bool:
    fields = (record.name, record.alias, record.subject, record.description)
    if any(term in f.casefold() for f in fields if f):
        return True
    return any(term in tag.casefold() for tag in record.tags)


def _created_key(record: Record) -> datetime:
    return record.created_at or _OLDEST


def _name_key(record: Record) -> tuple[str, str]:
    # Case-insensitive first, original spelling breaks ties.
    return (locale.strxfrm(record.name.casefold()), locale.strxfrm(record.name))


def date_range_cutoff(date_range: str, now: datetime) -> datetime:
    """
    Earliest created_at admitted by a date-range bucket.

    "week" is a fixed seven days; "month" and "year" are calendar steps,
    with the day clamped to the length of the target month
    (Mar 31 → Feb 28/29).
    """
    if date_range == "week":
        return now - timedelta(days=7)
    if date_range == "month":
        return _shift_months(now, -1)
    if date_range == "year":
        return _shift_months(now, -12)
    raise ValueError(f"unknown date range: {date_range!r}")


def _shift_months(dt: datetime, months: int) -> datetime:
    month_index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)
