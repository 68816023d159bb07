"""
Kernel test configuration.

Shared fixtures: a recording renderer, a record factory, and the two-record
"Tree" collection used throughout the filter and controller tests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from graphz.kernel.renderer import Renderer
from graphz.kernel.types import Record

NOW = datetime(2025, 3, 31, 12, 0, tzinfo=UTC)


class RecordingRenderer(Renderer):
    """Captures every call the controller makes."""

    def __init__(self) -> None:
        self.rendered: list[list[Record]] = []
        self.counts: list[int] = []
        self.errors: list[str] = []

    def render(self, records):
        self.rendered.append(list(records))

    def update_count(self, count):
        self.counts.append(count)

    def render_error(self, message):
        self.errors.append(message)

    @property
    def last(self) -> list[Record]:
        return self.rendered[-1]

    @property
    def last_names(self) -> list[str]:
        return [r.name for r in self.rendered[-1]]


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def make_record():
    counter = iter(range(1, 10_000))

    def _make(name, subject="math", *, views=0, tags=(), days_old=None, **kw):
        n = next(counter)
        created = NOW - timedelta(days=days_old) if days_old is not None else None
        return Record(
            id=kw.pop("id", f"g{n:03d}"),
            name=name,
            description=kw.pop("description", f"{name} description"),
            subject=subject,
            tags=tuple(tags),
            views=views,
            created_at=kw.pop("created_at", created),
            **kw,
        )

    return _make


@pytest.fixture
def trees(make_record):
    """Tree A (math, 5 views, #graph) and Tree B (bio, 20 views, #cell)."""
    return [
        make_record("Tree A", "math", views=5, tags=["graph"], days_old=3),
        make_record("Tree B", "bio", views=20, tags=["cell"], days_old=40),
    ]
