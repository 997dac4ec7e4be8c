# tixhub/services/role_session.py
import logging
from dataclasses import dataclass

from tixhub.core.errors import (
    IdentityError,
    ProfileStorageError,
    RoleMutationCode,
    RoleMutationError,
)
from tixhub.models.profile import (
    AuthUser,
    ClientProfile,
    Identity,
    OrganizerProfile,
    Role,
)
from tixhub.models.session import Anonymous, AuthState, Authenticated, Unprovisioned
from tixhub.repositories.identity_gateway import IdentityGateway
from tixhub.repositories.profile_repo import ProfileRepository
from tixhub.repositories.role_preference import RolePreferenceStore
from tixhub.schemas.auth import ClientProfileCreate, OrganizerProfileCreate, ProfileCreate
from tixhub.services.profile_resolver import APP_ROLE_KEY, ProfileResolver
from tixhub.services.session_store import SessionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthResult:
    error: IdentityError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RegisterResult:
    error: IdentityError | None = None
    needs_confirmation: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class RoleMutationResult:
    error: RoleMutationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _fail(code: RoleMutationCode, message: str) -> RoleMutationResult:
    return RoleMutationResult(error=RoleMutationError(code, message))


class RoleSessionManager:
    """
    The only writer of the SessionStore.

    Responsibilities:
      - login / register / logout through the identity backend
      - re-resolve the user on every auth change notification
      - switch between already-loaded roles (no network)
      - provision an additional role profile for the logged-in identity

    Every logout and auth change bumps a generation counter; a resolution
    that finishes under an older generation is dropped, so an in-flight
    resolution can never resurrect a user after logout.
    """

    def __init__(
        self,
        store: SessionStore,
        identity_gateway: IdentityGateway,
        repo: ProfileRepository,
        resolver: ProfileResolver,
        preferences: RolePreferenceStore,
    ):
        self.store = store
        self.identity_gateway = identity_gateway
        self.repo = repo
        self.resolver = resolver
        self.preferences = preferences
        self._generation = 0

    # ----- resolution -----

    async def resolve(self, identity: Identity | None) -> AuthState:
        """Resolve `identity` (None = no session) and publish the outcome."""
        generation = self._generation
        if identity is None:
            self.store.publish(Anonymous())
            return self.store.state

        resolution = await self.resolver.resolve(identity)
        if generation != self._generation:
            logger.debug("Dropping stale resolution for %s", identity.id)
            return self.store.state

        if resolution.user is not None:
            self.store.publish(Authenticated(user=resolution.user))
        else:
            self.store.publish(
                Unprovisioned(
                    identity_id=identity.id,
                    email=identity.email,
                    reason=resolution.reason or "no profile",
                )
            )
        return self.store.state

    async def apply_auth_change(self, event: str, identity: Identity | None) -> None:
        """Handle one backend notification (sign-in elsewhere, expiry, sign-out...)."""
        if event == "INITIAL_SESSION":
            return
        current = self.store.current_user
        if (
            event == "TOKEN_REFRESHED"
            and identity is not None
            and current is not None
            and current.profile.identity_id == identity.id
        ):
            return
        self._generation += 1
        await self.resolve(identity)

    # ----- identity operations -----

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Password sign-in. The user is set by the SIGNED_IN notification that
        follows, not here.
        """
        try:
            await self.identity_gateway.sign_in_with_password(email, password)
        except IdentityError as exc:
            return AuthResult(error=exc)
        return AuthResult()

    async def register(self, role: Role, registration: ProfileCreate, email: str, password: str) -> RegisterResult:
        """
        Sign up and stage the profile fields plus `app_role` in user metadata.
        The profile row is created by the resolver on first login.
        """
        expected = ClientProfileCreate if role == Role.CLIENT else OrganizerProfileCreate
        if role == Role.SUPER_ADMIN or not isinstance(registration, expected):
            return RegisterResult(
                error=IdentityError(f"Cannot register as {role.value}", code="invalid_role")
            )

        metadata = registration.model_dump(include=set(expected.model_fields))
        metadata[APP_ROLE_KEY] = role.value
        try:
            outcome = await self.identity_gateway.sign_up(email, password, metadata)
        except IdentityError as exc:
            return RegisterResult(error=exc)
        return RegisterResult(
            needs_confirmation=outcome.identity is not None and not outcome.has_session
        )

    async def logout(self) -> None:
        """Sign out and clear the user immediately, whatever the backend says."""
        self._generation += 1
        try:
            await self.identity_gateway.sign_out()
        except Exception as exc:
            logger.error("Error logging out: %s", exc)
        self.store.publish(Anonymous())

    # ----- role operations -----

    def switch_role(self, role: Role) -> RoleMutationResult:
        """Switch among loaded roles. Synchronous, never touches the backend."""
        user = self.store.current_user
        if user is None:
            logger.error("switch_role(%s) without a logged-in user", role.value)
            return _fail("not_authenticated", "You must be logged in to switch roles")
        if role not in user.profile.available_roles:
            logger.error("Role %s is not available for this user", role.value)
            return _fail("role_unavailable", f"Role {role.value} is not available")

        self.store.publish(Authenticated(user=user.as_role(role)))
        self.preferences.set(role)
        return RoleMutationResult()

    async def add_role(self, role: Role, fields: ProfileCreate) -> RoleMutationResult:
        """
        Create the profile for a role the logged-in identity does not hold
        yet, then make it the current role.

        A row already stored for that role (e.g. left behind by an earlier
        insert whose re-read failed) is adopted instead of inserted again.
        """
        user = self.store.current_user
        if user is None:
            return _fail("not_authenticated", "You must be logged in to add a role")
        if role == Role.SUPER_ADMIN or Role.SUPER_ADMIN in user.profile.available_roles:
            return _fail("role_not_addable", f"Role {role.value} cannot be added")
        if role in user.profile.available_roles:
            return _fail("role_exists", f"You already have a {role.value} profile")

        expected = ClientProfileCreate if role == Role.CLIENT else OrganizerProfileCreate
        if not isinstance(fields, expected):
            return _fail("role_not_addable", f"Profile fields do not match role {role.value}")

        identity_id = user.profile.identity_id
        try:
            created = await self._fetch(role, identity_id)
            if created is None:
                row = fields.to_row(identity_id, user.profile.email)
                if role == Role.CLIENT:
                    await self.repo.insert_customer(row)
                else:
                    await self.repo.insert_organizer(row)
                created = await self._fetch(role, identity_id)
            else:
                logger.info("Adopting existing %s profile for %s", role.value, identity_id)
        except ProfileStorageError as exc:
            logger.error("Error adding role %s: %s", role.value, exc)
            return _fail("storage_failed", str(exc))

        if created is None:
            return _fail("storage_failed", "Profile was created but could not be loaded")

        current = self.store.current_user
        if current is None or current.profile.identity_id != identity_id:
            return _fail("not_authenticated", "Session ended while adding the role")

        profile = current.profile.with_profile(role, created)
        self.store.publish(Authenticated(user=AuthUser(current_role=role, profile=profile)))
        self.preferences.set(role)
        return RoleMutationResult()

    async def _fetch(self, role: Role, identity_id: str) -> ClientProfile | OrganizerProfile | None:
        if role == Role.CLIENT:
            return await self.repo.get_customer(identity_id)
        return await self.repo.get_organizer(identity_id)
