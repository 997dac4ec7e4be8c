"""Unit tests for SessionBootstrapper and SessionStore."""

from __future__ import annotations

import logging

import pytest

from conftest import PASSWORD, seed_organizer
from tixhub.models.profile import Role
from tixhub.models.session import Anonymous, Authenticated, Unprovisioned, Unresolved
from tixhub.repositories.memory import InMemoryIdentityGateway, InMemoryProfileRepository
from tixhub.services.session_bootstrap import SessionBootstrapper
from tixhub.services.session_store import SessionStore


class TestSessionBootstrapper:
    """Tests for SessionBootstrapper."""

    async def test_no_session_is_anonymous(
        self,
        bootstrapper: SessionBootstrapper,
        gateway: InMemoryIdentityGateway,
        store: SessionStore,
    ) -> None:
        assert store.is_loading

        state = await bootstrapper.start()

        assert isinstance(state, Anonymous)
        assert not store.is_loading
        assert bootstrapper.subscribed
        assert gateway.listener_count == 1
        await bootstrapper.stop()

    async def test_existing_session_is_resolved_before_start_returns(
        self,
        bootstrapper: SessionBootstrapper,
        gateway: InMemoryIdentityGateway,
        repo: InMemoryProfileRepository,
        store: SessionStore,
    ) -> None:
        gateway.add_account("ben@example.com", PASSWORD, identity_id="u2")
        await seed_organizer(repo, "u2", "ben@example.com")
        gateway.start_session("ben@example.com")

        await bootstrapper.start()

        assert isinstance(store.state, Authenticated)
        assert store.current_user.current_role == Role.ORGANIZER
        await bootstrapper.stop()

    async def test_session_without_profile_is_unprovisioned(
        self,
        bootstrapper: SessionBootstrapper,
        gateway: InMemoryIdentityGateway,
        store: SessionStore,
    ) -> None:
        gateway.add_account("ghost@example.com", PASSWORD, identity_id="u9")
        gateway.start_session("ghost@example.com")

        state = await bootstrapper.start()

        assert isinstance(state, Unprovisioned)
        assert state.email == "ghost@example.com"
        assert store.current_user is None
        await bootstrapper.stop()

    async def test_unreachable_backend_degrades_to_anonymous(
        self,
        bootstrapper: SessionBootstrapper,
        gateway: InMemoryIdentityGateway,
        store: SessionStore,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        gateway.unreachable = True

        with caplog.at_level(logging.ERROR):
            state = await bootstrapper.start()

        assert isinstance(state, Anonymous)
        assert "Session bootstrap failed" in caplog.text
        await bootstrapper.stop()

    async def test_stop_unsubscribes(
        self,
        bootstrapper: SessionBootstrapper,
        gateway: InMemoryIdentityGateway,
        store: SessionStore,
    ) -> None:
        await bootstrapper.start()

        await bootstrapper.stop()
        gateway.emit("SIGNED_OUT", None)

        assert gateway.listener_count == 0
        assert not bootstrapper.subscribed
        assert isinstance(store.state, Anonymous)


class TestSessionStore:
    """Tests for SessionStore."""

    def test_starts_unresolved(self) -> None:
        store = SessionStore()

        assert isinstance(store.state, Unresolved)
        assert store.current_user is None
        assert store.is_loading

    def test_subscribers_see_every_publish(self) -> None:
        store = SessionStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)

        store.publish(Anonymous())
        unsubscribe()
        store.publish(Unresolved())

        assert seen == [Anonymous()]

    def test_broken_listener_does_not_block_others(self, caplog: pytest.LogCaptureFixture) -> None:
        store = SessionStore()
        seen = []

        def broken(state) -> None:
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)

        with caplog.at_level(logging.ERROR):
            store.publish(Anonymous())

        assert seen == [Anonymous()]
        assert "Session listener failed" in caplog.text
