"""
GRAPHZ Kernel: the gallery's filter core.

Components:
  filters     (records, filter_state) → ordered tuple  (pure, deterministic)
  controller  owns filter state + canonical records, drives the renderer
  store       store adapter contract + in-memory store
  renderer    view contract + mustache HTML renderer
"""

from graphz.kernel.controller import FilterController
from graphz.kernel.events import make_event
from graphz.kernel.filters import apply_filters, sort_records
from graphz.kernel.renderer import HtmlRenderer, Renderer, build_search_index, describe_active_filters
from graphz.kernel.store import GraphStore, MemoryStore, record_view
from graphz.kernel.types import FilterState, Record

__all__ = [
    "apply_filters",
    "sort_records",
    "make_event",
    "FilterController",
    "FilterState",
    "Record",
    "Renderer",
    "HtmlRenderer",
    "build_search_index",
    "describe_active_filters",
    "GraphStore",
    "MemoryStore",
    "record_view",
]
