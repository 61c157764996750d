"""
Tests for the in-memory entity store.

Covers id assignment, creation defaults, the counter increment contract and
the active/status coupling.
"""

import re
from datetime import timezone

import pytest

from trafficx.models import DEFAULT_MIN_VISIT_TIME


class TestUsers:
    async def test_ids_are_sequential(self, storage):
        first = await storage.create_user("alice", "hash")
        second = await storage.create_user("bob", "hash")
        assert (first.id, second.id) == (1, 2)

    async def test_new_user_has_zeroed_aggregates(self, storage):
        user = await storage.create_user("alice", "hash")
        assert user.points == 0
        assert user.hits == 0

    async def test_client_id_is_url_safe_and_unique(self, storage):
        users = [await storage.create_user(f"user{i}", "hash") for i in range(20)]
        client_ids = {u.client_id for u in users}
        assert len(client_ids) == 20
        for client_id in client_ids:
            assert re.fullmatch(r"[A-Za-z0-9_-]{12}", client_id)

    async def test_lookup_by_username(self, storage):
        user = await storage.create_user("alice", "hash")
        assert await storage.get_user_by_username("alice") is user
        assert await storage.get_user_by_username("nobody") is None

    async def test_unknown_user_is_none(self, storage):
        assert await storage.get_user(42) is None


class TestSessions:
    async def test_defaults(self, storage):
        session = await storage.create_session(user_id=1, client_id="abc")
        assert session.points == 0
        assert session.hits == 0
        assert session.active is True
        assert session.status == "Ready"
        assert session.proxy == "System"
        assert session.note == ""
        assert session.proxy_config is None

    async def test_explicit_fields_are_kept(self, storage):
        session = await storage.create_session(
            user_id=1, client_id="abc", note="office", proxy="Custom", proxy_config="10.0.0.1:8080"
        )
        assert session.note == "office"
        assert session.proxy == "Custom"
        assert session.proxy_config == "10.0.0.1:8080"

    async def test_get_sessions_filters_by_owner(self, storage):
        await storage.create_session(user_id=1, client_id="a")
        await storage.create_session(user_id=2, client_id="b")
        await storage.create_session(user_id=1, client_id="a")
        assert [s.id for s in await storage.get_sessions(1)] == [1, 3]

    async def test_get_by_client_id(self, storage):
        session = await storage.create_session(user_id=1, client_id="abc")
        assert await storage.get_session_by_client_id("abc") is session
        assert await storage.get_session_by_client_id("zzz") is None

    @pytest.mark.parametrize("start_status", ["Ready", "Paused", "Restarting", "Custom"])
    async def test_set_active_forces_status(self, storage, start_status):
        session = await storage.create_session(user_id=1, client_id="abc")
        await storage.set_session_status(session.id, start_status)

        await storage.set_session_active(session.id, False)
        assert (session.active, session.status) == (False, "Paused")

        await storage.set_session_status(session.id, start_status)
        await storage.set_session_active(session.id, True)
        assert (session.active, session.status) == (True, "Ready")

    async def test_set_status_leaves_active_alone(self, storage):
        session = await storage.create_session(user_id=1, client_id="abc")
        await storage.set_session_active(session.id, False)
        await storage.set_session_status(session.id, "Ready")
        assert session.active is False
        assert session.status == "Ready"

    async def test_sessions_by_status(self, storage):
        first = await storage.create_session(user_id=1, client_id="a")
        await storage.create_session(user_id=1, client_id="a")
        await storage.set_session_status(first.id, "Restarting")
        assert [s.id for s in await storage.get_sessions_by_status("Restarting")] == [first.id]


class TestUrls:
    async def test_defaults(self, storage):
        url = await storage.create_url(user_id=1, url="https://example.com")
        assert url.min_visit_time == DEFAULT_MIN_VISIT_TIME == 30
        assert (url.hits, url.today_hits, url.points_used) == (0, 0, 0)
        assert url.active is True
        assert url.created_at.tzinfo is timezone.utc

    async def test_explicit_min_visit_time(self, storage):
        url = await storage.create_url(user_id=1, url="https://example.com", min_visit_time=20)
        assert url.min_visit_time == 20

    async def test_ids_not_reused_after_delete(self, storage):
        first = await storage.create_url(user_id=1, url="https://a.example")
        await storage.delete_url(first.id)
        second = await storage.create_url(user_id=1, url="https://b.example")
        assert second.id == first.id + 1
        assert await storage.get_url(first.id) is None

    async def test_delete_unknown_is_noop(self, storage):
        await storage.delete_url(99)

    async def test_set_active(self, storage):
        url = await storage.create_url(user_id=1, url="https://example.com")
        await storage.set_url_active(url.id, False)
        assert url.active is False

    async def test_reset_today_hits_only_touches_today(self, storage):
        url = await storage.create_url(user_id=1, url="https://example.com")
        await storage.increment_url(url.id, "hits", 4)
        await storage.increment_url(url.id, "today_hits", 4)

        assert await storage.reset_today_hits() == 1
        assert url.today_hits == 0
        assert url.hits == 4


class TestIncrements:
    async def test_increment_adds_delta(self, storage):
        user = await storage.create_user("alice", "hash")
        await storage.increment_user(user.id, "points", 2)
        await storage.increment_user(user.id, "points", 3)
        assert user.points == 5

    async def test_unknown_id_is_noop(self, storage):
        await storage.increment_session(7, "hits", 1)
        await storage.increment_url(7, "hits", 1)
        await storage.increment_user(7, "hits", 1)

    @pytest.mark.parametrize(
        "method,field",
        [
            ("increment_user", "client_id"),
            ("increment_session", "status"),
            ("increment_url", "min_visit_time"),
            ("increment_url", "points"),
        ],
    )
    async def test_rejects_non_counter_fields(self, storage, method, field):
        with pytest.raises(ValueError):
            await getattr(storage, method)(1, field, 1)
