# tixhub/repositories/memory.py
"""
In-memory backend used by demo mode and by the test-suite.

Both classes mimic the Supabase behaviour the auth core relies on:
  - sign-in / sign-up / sign-out emit auth change events synchronously
  - metadata updates merge, and a None value deletes the key
  - one profile row per identity per table

Optional asyncio.Event gates let tests hold a call in flight.
"""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any

from tixhub.core.errors import IdentityError, ProfileStorageError
from tixhub.models.profile import ClientProfile, Identity, OrganizerProfile
from tixhub.repositories.identity_gateway import (
    AuthChangeCallback,
    SignUpOutcome,
    Unsubscribe,
)


class InMemoryIdentityGateway:
    def __init__(self, require_confirmation: bool = False):
        self.require_confirmation = require_confirmation
        self.unreachable = False
        self.fail_sign_out = False
        self.sign_in_gate: asyncio.Event | None = None

        self._accounts: dict[str, dict[str, Any]] = {}
        self._session_email: str | None = None
        self._listeners: list[AuthChangeCallback] = []
        self.metadata_updates: list[dict[str, Any]] = []

    # ----- test / demo helpers -----

    def add_account(
        self,
        email: str,
        password: str,
        metadata: dict[str, Any] | None = None,
        identity_id: str | None = None,
        confirmed: bool = True,
    ) -> Identity:
        identity = Identity(
            id=identity_id or str(uuid.uuid4()),
            email=email,
            user_metadata=dict(metadata or {}),
        )
        self._accounts[email] = {
            "password": password,
            "identity": identity,
            "confirmed": confirmed,
        }
        return identity.model_copy(deep=True)

    def start_session(self, email: str) -> None:
        """Pretend a session was restored from storage (no event emitted)."""
        self._session_email = email

    def confirm(self, email: str) -> None:
        self._accounts[email]["confirmed"] = True

    def identity(self, email: str) -> Identity:
        return self._accounts[email]["identity"].model_copy(deep=True)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, event: str, identity: Identity | None) -> None:
        for listener in list(self._listeners):
            listener(event, identity)

    # ----- IdentityGateway -----

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> SignUpOutcome:
        if email in self._accounts:
            raise IdentityError("User already registered", 422, "user_already_exists")
        if len(password) < 6:
            raise IdentityError(
                "Password should be at least 6 characters.", 422, "weak_password"
            )
        identity = self.add_account(
            email, password, metadata, confirmed=not self.require_confirmation
        )
        if self.require_confirmation:
            return SignUpOutcome(identity=identity, has_session=False)
        self._session_email = email
        self.emit("SIGNED_IN", self.identity(email))
        return SignUpOutcome(identity=identity, has_session=True)

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        if self.sign_in_gate is not None:
            await self.sign_in_gate.wait()
        account = self._accounts.get(email)
        if account is None or account["password"] != password:
            raise IdentityError("Invalid login credentials", 400, "invalid_credentials")
        if not account["confirmed"]:
            raise IdentityError("Email not confirmed", 400, "email_not_confirmed")
        self._session_email = email
        identity = self.identity(email)
        self.emit("SIGNED_IN", identity)
        return identity

    async def sign_out(self) -> None:
        if self.fail_sign_out:
            raise IdentityError("Failed to sign out", 500)
        self._session_email = None
        self.emit("SIGNED_OUT", None)

    async def get_session_identity(self) -> Identity | None:
        if self.unreachable:
            raise ConnectionError("backend unreachable")
        if self._session_email is None:
            return None
        return self.identity(self._session_email)

    def on_auth_state_change(self, callback: AuthChangeCallback) -> Unsubscribe:
        self._listeners.append(callback)

        def _unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return _unsubscribe

    async def update_metadata(self, changes: dict[str, Any]) -> None:
        if self._session_email is None:
            raise IdentityError("Auth session missing!", 400, "session_not_found")
        self.metadata_updates.append(dict(changes))
        identity: Identity = self._accounts[self._session_email]["identity"]
        metadata = dict(identity.user_metadata)
        for key, value in changes.items():
            if value is None:
                metadata.pop(key, None)
            else:
                metadata[key] = value
        identity.user_metadata = metadata
        self.emit("USER_UPDATED", self.identity(self._session_email))


class InMemoryProfileRepository:
    def __init__(self):
        self.customers: dict[str, ClientProfile] = {}
        self.organizers: dict[str, OrganizerProfile] = {}
        self.select_calls = 0
        self.insert_calls = 0
        self.fail_inserts = False
        self.select_gate: asyncio.Event | None = None
        self._next_id = 1

    @property
    def call_count(self) -> int:
        return self.select_calls + self.insert_calls

    async def _before_select(self) -> None:
        self.select_calls += 1
        if self.select_gate is not None:
            await self.select_gate.wait()

    def _new_row(self, row: dict[str, Any]) -> dict[str, Any]:
        self.insert_calls += 1
        if self.fail_inserts:
            raise ProfileStorageError("new row violates row-level security policy")
        stored = dict(row, id=self._next_id, created_at=datetime.now(timezone.utc))
        self._next_id += 1
        return stored

    async def get_customer(self, identity_id: str) -> ClientProfile | None:
        await self._before_select()
        return self.customers.get(identity_id)

    async def get_organizer(self, identity_id: str) -> OrganizerProfile | None:
        await self._before_select()
        return self.organizers.get(identity_id)

    async def insert_customer(self, row: dict[str, Any]) -> None:
        stored = self._new_row(row)
        if stored["supabase_user_id"] in self.customers:
            raise ProfileStorageError(
                'duplicate key value violates unique constraint "customers_supabase_user_id_key"'
            )
        self.customers[stored["supabase_user_id"]] = ClientProfile.model_validate(stored)

    async def insert_organizer(self, row: dict[str, Any]) -> None:
        stored = self._new_row(row)
        if stored["supabase_user_id"] in self.organizers:
            raise ProfileStorageError(
                'duplicate key value violates unique constraint "organizers_supabase_user_id_key"'
            )
        self.organizers[stored["supabase_user_id"]] = OrganizerProfile.model_validate(stored)
