"""User dashboard: stats over bookmarked graphs and CSV export."""

from __future__ import annotations

import csv
import io
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from graphz.kernel.types import Record

CSV_HEADER = ("Graph ID", "Name", "Subject", "Views")


@dataclass(frozen=True)
class BookmarkStats:
    total_bookmarks: int = 0
    total_views: int = 0
    favorite_subject: str | None = None


def bookmark_stats(graphs: Iterable[Record | dict[str, Any]]) -> BookmarkStats:
    """
    Totals over the user's bookmarked graphs. The favourite subject is the
    most common one; ties go to whichever was bookmarked first.
    """
    records = [g if isinstance(g, Record) else Record.from_dict(g) for g in graphs]
    if not records:
        return BookmarkStats()
    subjects = Counter(r.subject for r in records)
    favorite = max(subjects, key=lambda s: subjects[s])
    return BookmarkStats(
        total_bookmarks=len(records),
        total_views=sum(r.views for r in records),
        favorite_subject=favorite,
    )


def export_bookmarks_csv(bookmark_ids: Iterable[str], graphs: Iterable[Record | dict[str, Any]]) -> str:
    """
    CSV of bookmarked graphs in bookmark order. Bookmarks whose graph is
    not in `graphs` are left out.
    """
    by_id = {}
    for g in graphs:
        record = g if isinstance(g, Record) else Record.from_dict(g)
        by_id[record.id] = record

    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for graph_id in bookmark_ids:
        record = by_id.get(graph_id)
        if record is None:
            continue
        writer.writerow((record.id, record.name, record.subject, record.views))
    return buf.getvalue()
