"""
Per-user bookmarks.

Bookmark ids live on the user's profile document; the graphs they point
at live in the graph store. A bookmark whose graph has since been deleted
is kept on the profile but skipped when listing.
"""

from __future__ import annotations

import logging
from typing import Any

from graphz.kernel.store import GraphStore
from graphz.models.graph import UserProfile

logger = logging.getLogger(__name__)


class NotSignedIn(Exception):
    """Bookmarking requires a signed-in user."""


class ProfileStore:
    """
    Abstract profile storage (the hosted "users" collection).
    Use MemoryProfileStore for tests.
    """

    async def load(self, uid: str) -> UserProfile | None:
        raise NotImplementedError

    async def save_bookmarks(self, uid: str, bookmarks: list[str]) -> None:
        raise NotImplementedError


class MemoryProfileStore(ProfileStore):
    """In-memory profile storage for testing."""

    def __init__(self) -> None:
        self.profiles: dict[str, UserProfile] = {}

    async def load(self, uid: str) -> UserProfile | None:
        profile = self.profiles.get(uid)
        return profile.model_copy(deep=True) if profile is not None else None

    async def save_bookmarks(self, uid: str, bookmarks: list[str]) -> None:
        profile = self.profiles.get(uid) or UserProfile(uid=uid)
        self.profiles[uid] = profile.model_copy(update={"bookmarks": list(bookmarks)})


class Bookmarks:
    """The signed-in user's bookmark list, kept in sync with their profile."""

    def __init__(self, graphs: GraphStore, profiles: ProfileStore):
        self._graphs = graphs
        self._profiles = profiles
        self._uid: str | None = None
        self._ids: list[str] = []

    @property
    def ids(self) -> list[str]:
        return list(self._ids)

    @property
    def count(self) -> int:
        return len(self._ids)

    def is_bookmarked(self, graph_id: str) -> bool:
        return graph_id in self._ids

    async def on_auth_state_changed(self, uid: str | None) -> None:
        """Load bookmarks on sign-in; forget them on sign-out."""
        self._uid = uid
        if uid is None:
            self._ids = []
            return
        profile = await self._profiles.load(uid)
        self._ids = list(dict.fromkeys(profile.bookmarks)) if profile else []

    async def toggle(self, graph_id: str) -> bool:
        """
        Add the graph if absent, remove it if present, then persist.
        Returns True when the graph is bookmarked afterwards.
        """
        if self._uid is None:
            raise NotSignedIn("sign in to bookmark graphs")
        if graph_id in self._ids:
            updated = [i for i in self._ids if i != graph_id]
        else:
            updated = [*self._ids, graph_id]
        await self._profiles.save_bookmarks(self._uid, updated)
        self._ids = updated
        logger.info("bookmark %s for %s: %s", "added" if graph_id in updated else "removed", self._uid, graph_id)
        return graph_id in updated

    async def bookmarked_graphs(self) -> list[dict[str, Any]]:
        """Records for every bookmark that still exists, in bookmark order."""
        graphs: list[dict[str, Any]] = []
        for graph_id in self._ids:
            record = await self._graphs.get(graph_id)
            if record is None:
                logger.debug("bookmarked graph %s no longer exists", graph_id)
                continue
            graphs.append(record)
        return graphs
