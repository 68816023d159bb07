"""
Tests for per-user bookmarks.
"""

import pytest

from graphz.bookmarks import Bookmarks, MemoryProfileStore, NotSignedIn
from graphz.kernel.store import MemoryStore
from graphz.models.graph import UserProfile


def graph(name):
    return {"name": name, "description": "d", "subject": "math", "image_url": "https://x.test/g.png"}


@pytest.fixture
def graphs():
    return MemoryStore()


@pytest.fixture
def profiles():
    return MemoryProfileStore()


@pytest.fixture
def bookmarks(graphs, profiles):
    return Bookmarks(graphs, profiles)


class TestBookmarks:
    @pytest.mark.asyncio
    async def test_toggle_requires_sign_in(self, bookmarks):
        with pytest.raises(NotSignedIn):
            await bookmarks.toggle("g1")

    @pytest.mark.asyncio
    async def test_toggle_adds_then_removes_and_persists(self, bookmarks, profiles):
        await bookmarks.on_auth_state_changed("u1")

        assert await bookmarks.toggle("g1") is True
        assert await bookmarks.toggle("g2") is True
        assert profiles.profiles["u1"].bookmarks == ["g1", "g2"]

        assert await bookmarks.toggle("g1") is False
        assert bookmarks.ids == ["g2"]
        assert profiles.profiles["u1"].bookmarks == ["g2"]
        assert bookmarks.count == 1

    @pytest.mark.asyncio
    async def test_loads_on_sign_in_and_clears_on_sign_out(self, bookmarks, profiles):
        profiles.profiles["u1"] = UserProfile(uid="u1", bookmarks=["g1", "g1", "g2"])

        await bookmarks.on_auth_state_changed("u1")
        assert bookmarks.ids == ["g1", "g2"]
        assert bookmarks.is_bookmarked("g2")

        await bookmarks.on_auth_state_changed(None)
        assert bookmarks.ids == []

    @pytest.mark.asyncio
    async def test_new_user_has_no_bookmarks(self, bookmarks):
        await bookmarks.on_auth_state_changed("fresh")
        assert bookmarks.ids == []

    @pytest.mark.asyncio
    async def test_bookmarked_graphs_skip_deleted(self, bookmarks, graphs):
        keep = await graphs.create(graph("Keep"))
        gone = await graphs.create(graph("Gone"))
        await bookmarks.on_auth_state_changed("u1")
        await bookmarks.toggle(gone)
        await bookmarks.toggle(keep)
        await graphs.delete(gone)

        result = await bookmarks.bookmarked_graphs()

        assert [g["name"] for g in result] == ["Keep"]
        assert bookmarks.ids == [gone, keep]
