# tixhub/services/profile_resolver.py
import logging
from dataclasses import dataclass

from pydantic import ValidationError

from tixhub.core.errors import IdentityError, ProfileStorageError
from tixhub.models.profile import (
    AuthUser,
    ClientProfile,
    Identity,
    OrganizerProfile,
    Role,
    SuperAdminProfile,
    UserProfile,
)
from tixhub.repositories.identity_gateway import IdentityGateway
from tixhub.repositories.profile_repo import ProfileRepository
from tixhub.repositories.role_preference import RolePreferenceStore
from tixhub.schemas.auth import (
    CLIENT_STAGED_KEYS,
    ORGANIZER_STAGED_KEYS,
    STAGED_PROFILE_KEYS,
    ClientProfileCreate,
    OrganizerProfileCreate,
)

logger = logging.getLogger(__name__)

APP_ROLE_KEY = "app_role"


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one identity: a user, or the reason there is none."""

    user: AuthUser | None
    reason: str | None = None


class ProfileResolver:
    """
    Turns an authenticated Identity into an AuthUser.

    Order (first match wins):
      1. email == SUPER_ADMIN_EMAIL => super admin only
      2. customers / organizers rows for the identity (either, both, none)
      3. none found => create one from staged signup metadata (`app_role`),
         then purge the staged keys so the next login does not insert again
      4. still none => no user
    Current role = stored preference if available, else first discovered.
    """

    def __init__(
        self,
        repo: ProfileRepository,
        identity_gateway: IdentityGateway,
        preferences: RolePreferenceStore,
        super_admin_email: str | None = None,
        super_admin_name: str = "Admin User",
    ):
        self.repo = repo
        self.identity_gateway = identity_gateway
        self.preferences = preferences
        self.super_admin_email = super_admin_email
        self.super_admin_name = super_admin_name
        if not super_admin_email:
            logger.warning("SUPER_ADMIN_EMAIL is not set; Super Admin login is disabled.")

    async def resolve(self, identity: Identity) -> Resolution:
        if self.super_admin_email and identity.email == self.super_admin_email:
            return Resolution(user=self._super_admin(identity))

        try:
            customer = await self.repo.get_customer(identity.id)
            organizer = await self.repo.get_organizer(identity.id)
        except ProfileStorageError as exc:
            logger.error("Error loading profiles for %s: %s", identity.id, exc)
            return Resolution(user=None, reason=f"profile lookup failed: {exc}")

        if customer is None and organizer is None:
            return await self._provision_from_metadata(identity)

        roles: list[Role] = []
        if customer is not None:
            roles.append(Role.CLIENT)
        if organizer is not None:
            roles.append(Role.ORGANIZER)
        profile = UserProfile(
            identity_id=identity.id,
            email=identity.email,
            customer=customer,
            organizer=organizer,
            available_roles=roles,
        )
        return Resolution(user=AuthUser(current_role=self._pick_role(roles), profile=profile))

    def _super_admin(self, identity: Identity) -> AuthUser:
        first, _, last = self.super_admin_name.partition(" ")
        admin = SuperAdminProfile(first_name=first, last_name=last, email=identity.email)
        profile = UserProfile(
            identity_id=identity.id,
            email=identity.email,
            super_admin=admin,
            available_roles=[Role.SUPER_ADMIN],
        )
        return AuthUser(current_role=Role.SUPER_ADMIN, profile=profile)

    def _pick_role(self, roles: list[Role]) -> Role:
        preferred = self.preferences.get()
        if preferred is not None and preferred in roles:
            return preferred
        return roles[0]

    async def _provision_from_metadata(self, identity: Identity) -> Resolution:
        """
        First login after sign-up: materialize the profile staged in
        user_metadata. Only the single `app_role` chosen at registration is
        attempted; a second role can only be added later via add_role.
        """
        metadata = identity.user_metadata
        app_role = metadata.get(APP_ROLE_KEY)

        try:
            if app_role == Role.CLIENT.value:
                fields = ClientProfileCreate.model_validate(
                    {k: metadata[k] for k in CLIENT_STAGED_KEYS if k in metadata}
                )
                await self.repo.insert_customer(fields.to_row(identity.id, identity.email))
                created: ClientProfile | OrganizerProfile | None = (
                    await self.repo.get_customer(identity.id)
                )
                role = Role.CLIENT
            elif app_role == Role.ORGANIZER.value:
                fields = OrganizerProfileCreate.model_validate(
                    {k: metadata[k] for k in ORGANIZER_STAGED_KEYS if k in metadata}
                )
                await self.repo.insert_organizer(fields.to_row(identity.id, identity.email))
                created = await self.repo.get_organizer(identity.id)
                role = Role.ORGANIZER
            else:
                logger.warning(
                    "User %s is logged in but no profile found in customers or organizers.",
                    identity.id,
                )
                return Resolution(user=None, reason="no profile and no staged signup data")
        except ValidationError:
            logger.warning(
                "User %s has app_role=%r but incomplete signup metadata.",
                identity.id,
                app_role,
            )
            return Resolution(user=None, reason="incomplete staged signup data")
        except ProfileStorageError as exc:
            logger.error("Error creating user profile from metadata: %s", exc)
            return Resolution(user=None, reason=f"profile creation failed: {exc}")

        if created is None:
            logger.error("Profile for %s was inserted but could not be re-read.", identity.id)
            return Resolution(user=None, reason="created profile not readable")

        if role == Role.CLIENT:
            profile = UserProfile(
                identity_id=identity.id,
                email=identity.email,
                customer=created,
                available_roles=[role],
            )
        else:
            profile = UserProfile(
                identity_id=identity.id,
                email=identity.email,
                organizer=created,
                available_roles=[role],
            )

        await self._purge_staged_metadata(identity)
        return Resolution(user=AuthUser(current_role=role, profile=profile))

    async def _purge_staged_metadata(self, identity: Identity) -> None:
        staged = [
            key
            for key in (APP_ROLE_KEY, *STAGED_PROFILE_KEYS)
            if key in identity.user_metadata
        ]
        if not staged:
            return
        try:
            await self.identity_gateway.update_metadata({key: None for key in staged})
        except IdentityError as exc:
            # The row exists now, so the next login finds it by query instead
            logger.warning("Could not purge signup metadata for %s: %s", identity.id, exc)
