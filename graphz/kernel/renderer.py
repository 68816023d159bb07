"""
GRAPHZ Kernel: Renderer

The view is an external collaborator; the controller only needs

  render(records)        the ordered result set
  update_count(n)        the result counter
  render_error(message)  a persistent inline error replacing the results

HtmlRenderer fulfils that contract with mustache templates (chevron),
which HTML-escape every {{field}} so record content is never injected raw.

Pure helpers used by any renderer:
  format_result_count, describe_active_filters, build_search_index
"""

from __future__ import annotations

from collections.abc import Callable, Collection, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import chevron

from graphz.kernel.types import ALL, DEFAULT_SORT, FilterState, Record

EMPTY_MESSAGE = "No graphs found matching your search."
EMPTY_HINT = "Try different keywords or check back later."
LOAD_ERROR_MESSAGE = "Error loading graphs. Please refresh the page."

# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

CARD_TEMPLATE = """\
<div class="graph-card" data-id="{{id}}">
  <div class="graph-image-container">
    <img src="{{image_url}}" alt="{{name}}" class="graph-image">
    <button class="bookmark-btn{{#bookmarked}} bookmarked{{/bookmarked}}" data-graph-id="{{id}}">\
{{#bookmarked}}&#9733;{{/bookmarked}}{{^bookmarked}}&#9734;{{/bookmarked}}</button>
  </div>
  <div class="graph-content">
    <h3 class="graph-title">{{name}}</h3>
    {{#has_alias}}<p class="graph-alias">"{{alias}}"</p>{{/has_alias}}
    <p class="graph-description">{{description}}</p>
    <div class="graph-stats">
      <span class="view-count">{{views}} views</span>
      <span class="graph-subject">{{subject}}</span>
    </div>
    {{#has_tags}}<div class="graph-tags">{{#tags}}<span class="graph-tag">{{.}}</span>{{/tags}}</div>{{/has_tags}}
  </div>
</div>"""

EMPTY_TEMPLATE = """\
<div class="loading">
  <p>{{message}}</p>
  <p class="hint">{{hint}}</p>
</div>"""

ERROR_TEMPLATE = '<div class="loading error">{{message}}</div>'


# ---------------------------------------------------------------------------
# Contract
# ---------------------------------------------------------------------------


class Renderer:
    """Abstract view. The controller drives it; it never reads back."""

    def render(self, records: Sequence[Record]) -> None:
        raise NotImplementedError

    def update_count(self, count: int) -> None:
        raise NotImplementedError

    def render_error(self, message: str) -> None:
        raise NotImplementedError


class HtmlRenderer(Renderer):
    """
    Renders gallery cards into `html` and the counter into `count_text`.

    `bookmarked` is asked for the signed-in user's bookmark ids at render
    time, so star state follows the bookmark list without a re-subscribe.
    """

    def __init__(self, bookmarked: Callable[[], Collection[str]] | None = None) -> None:
        self._bookmarked = bookmarked
        self.html = ""
        self.count_text = ""
        self.error: str | None = None

    def render(self, records: Sequence[Record]) -> None:
        self.error = None
        if not records:
            self.html = chevron.render(EMPTY_TEMPLATE, {"message": EMPTY_MESSAGE, "hint": EMPTY_HINT})
            return
        marked = set(self._bookmarked()) if self._bookmarked else set()
        self.html = "\n".join(chevron.render(CARD_TEMPLATE, card_context(r, r.id in marked)) for r in records)

    def update_count(self, count: int) -> None:
        self.count_text = format_result_count(count)

    def render_error(self, message: str) -> None:
        self.error = message
        self.html = chevron.render(ERROR_TEMPLATE, {"message": message})


def card_context(record: Record, bookmarked: bool = False) -> dict[str, Any]:
    return {
        "id": record.id,
        "name": record.name,
        "alias": record.alias,
        "has_alias": bool(record.alias),
        "description": record.description,
        "subject": record.subject,
        "image_url": record.image_url,
        "views": record.views,
        "tags": list(record.tags),
        "has_tags": bool(record.tags),
        "bookmarked": bookmarked,
    }


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def format_result_count(count: int) -> str:
    if count == 1:
        return "1 graph found"
    return f"{count} graphs found"


def describe_active_filters(state: FilterState) -> list[str]:
    """
    Chips for the active-filters bar. Sort is always listed; the other
    fields only when they differ from their default.
    """
    chips: list[str] = []
    if state.query.strip():
        chips.append(f"Search: {state.query.strip()}")
    if state.subject != ALL:
        chips.append(f"Subject: {state.subject}")
    if state.tags:
        chips.append(f"Tags: {', '.join(sorted(state.tags))}")
    if state.date_range != ALL:
        chips.append(f"Date: {state.date_range}")
    if state.min_views > 0:
        chips.append(f"Min Views: {state.min_views}")
    chips.append(f"Sort: {state.sort_by or DEFAULT_SORT}")
    return chips


@dataclass(frozen=True)
class SearchIndex:
    """Distinct tags and subjects present in a snapshot, sorted."""

    tags: tuple[str, ...] = ()
    subjects: tuple[str, ...] = ()


def build_search_index(records: Iterable[Record]) -> SearchIndex:
    tags: set[str] = set()
    subjects: set[str] = set()
    for record in records:
        tags.update(record.tags)
        if record.subject:
            subjects.add(record.subject)
    return SearchIndex(tags=tuple(sorted(tags)), subjects=tuple(sorted(subjects)))
