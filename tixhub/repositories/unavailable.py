"""
Stand-ins used when the Supabase client could not be created.

The app keeps serving anonymously: session restore fails (and the
bootstrapper falls back to Anonymous), every identity call returns an
IdentityError and every table call a ProfileStorageError.
"""

from typing import Any

from tixhub.core.errors import IdentityError, ProfileStorageError
from tixhub.models.profile import ClientProfile, Identity, OrganizerProfile
from tixhub.repositories.identity_gateway import (
    AuthChangeCallback,
    SignUpOutcome,
    Unsubscribe,
)

UNAVAILABLE_MESSAGE = "Authentication service unavailable"


class UnavailableIdentityGateway:
    def __init__(self, reason: str):
        self.reason = reason

    def _error(self) -> IdentityError:
        return IdentityError(UNAVAILABLE_MESSAGE, 503, "service_unavailable")

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> SignUpOutcome:
        raise self._error()

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        raise self._error()

    async def sign_out(self) -> None:
        raise self._error()

    async def get_session_identity(self) -> Identity | None:
        raise self._error()

    def on_auth_state_change(self, callback: AuthChangeCallback) -> Unsubscribe:
        return lambda: None

    async def update_metadata(self, changes: dict[str, Any]) -> None:
        raise self._error()


class UnavailableProfileRepository:
    def __init__(self, reason: str):
        self.reason = reason

    async def get_customer(self, identity_id: str) -> ClientProfile | None:
        raise ProfileStorageError(self.reason)

    async def get_organizer(self, identity_id: str) -> OrganizerProfile | None:
        raise ProfileStorageError(self.reason)

    async def insert_customer(self, row: dict[str, Any]) -> None:
        raise ProfileStorageError(self.reason)

    async def insert_organizer(self, row: dict[str, Any]) -> None:
        raise ProfileStorageError(self.reason)
