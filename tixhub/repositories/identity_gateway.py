# tixhub/repositories/identity_gateway.py
import logging
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from supabase import AsyncClient, AuthError

from tixhub.core.errors import IdentityError
from tixhub.models.profile import Identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignUpOutcome:
    """
    Result of a successful sign-up.

    has_session is False when the backend wants the email confirmed before
    it hands out a session.
    """

    identity: Identity | None
    has_session: bool


# (event, identity or None when the session is gone)
AuthChangeCallback = Callable[[str, Identity | None], None]
Unsubscribe = Callable[[], None]


class IdentityGateway(Protocol):
    """
    What the auth core needs from the identity backend.

    Every method raises IdentityError on backend failure.
    """

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> SignUpOutcome: ...

    async def sign_in_with_password(self, email: str, password: str) -> Identity: ...

    async def sign_out(self) -> None: ...

    async def get_session_identity(self) -> Identity | None: ...

    def on_auth_state_change(self, callback: AuthChangeCallback) -> Unsubscribe: ...

    async def update_metadata(self, changes: dict[str, Any]) -> None:
        """Merge `changes` into user metadata; keys mapped to None are removed."""
        ...


def _to_identity(user: Any) -> Identity:
    return Identity(
        id=str(user.id),
        email=user.email or "",
        user_metadata=dict(user.user_metadata or {}),
    )


def _wrap(exc: AuthError) -> IdentityError:
    return IdentityError(
        exc.message,
        status=getattr(exc, "status", None),
        code=getattr(exc, "code", None),
    )


class SupabaseIdentityGateway:
    """
    IdentityGateway over Supabase Auth (`client.auth`).

    Responsibilities:
      - Translate Supabase users/sessions into Identity
      - Translate supabase AuthError into IdentityError, message untouched
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any]
    ) -> SignUpOutcome:
        try:
            resp = await self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": metadata},
                }
            )
        except AuthError as exc:
            raise _wrap(exc) from exc
        identity = _to_identity(resp.user) if resp.user else None
        return SignUpOutcome(identity=identity, has_session=resp.session is not None)

    async def sign_in_with_password(self, email: str, password: str) -> Identity:
        try:
            resp = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as exc:
            raise _wrap(exc) from exc
        return _to_identity(resp.user)

    async def sign_out(self) -> None:
        try:
            await self.client.auth.sign_out()
        except AuthError as exc:
            raise _wrap(exc) from exc

    async def get_session_identity(self) -> Identity | None:
        try:
            session = await self.client.auth.get_session()
        except AuthError as exc:
            raise _wrap(exc) from exc
        if session is None or session.user is None:
            return None
        return _to_identity(session.user)

    def on_auth_state_change(self, callback: AuthChangeCallback) -> Unsubscribe:
        def _listener(event: Any, session: Any) -> None:
            user = getattr(session, "user", None)
            callback(str(getattr(event, "value", event)), _to_identity(user) if user else None)

        subscription = self.client.auth.on_auth_state_change(_listener)
        return subscription.unsubscribe

    async def update_metadata(self, changes: dict[str, Any]) -> None:
        try:
            await self.client.auth.update_user({"data": changes})
        except AuthError as exc:
            raise _wrap(exc) from exc
