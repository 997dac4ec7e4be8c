# tixhub/services/auth_backend.py
import logging
from dataclasses import dataclass, field

from tixhub.core.config import Settings
from tixhub.core.supabase_client import supabase_public
from tixhub.repositories.identity_gateway import IdentityGateway, SupabaseIdentityGateway
from tixhub.repositories.profile_repo import ProfileRepository, SupabaseProfileRepository
from tixhub.repositories.role_preference import (
    FileRolePreferenceStore,
    InMemoryRolePreferenceStore,
    RolePreferenceStore,
)
from tixhub.repositories.unavailable import (
    UnavailableIdentityGateway,
    UnavailableProfileRepository,
)
from tixhub.services.auth_modal import AuthModalState
from tixhub.services.demo import seed_demo_backend
from tixhub.services.profile_resolver import ProfileResolver
from tixhub.services.role_session import RoleSessionManager
from tixhub.services.session_bootstrap import SessionBootstrapper
from tixhub.services.session_store import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class AuthBackend:
    """Everything the app holds for one UI session, wired together."""

    store: SessionStore
    manager: RoleSessionManager
    bootstrapper: SessionBootstrapper
    modal: AuthModalState = field(default_factory=AuthModalState)
    demo_mode: bool = False


def build_auth_backend(
    identity_gateway: IdentityGateway,
    repo: ProfileRepository,
    preferences: RolePreferenceStore,
    settings: Settings,
    demo_mode: bool = False,
) -> AuthBackend:
    store = SessionStore()
    resolver = ProfileResolver(
        repo,
        identity_gateway,
        preferences,
        super_admin_email=settings.SUPER_ADMIN_EMAIL,
        super_admin_name=settings.SUPER_ADMIN_NAME,
    )
    manager = RoleSessionManager(store, identity_gateway, repo, resolver, preferences)
    bootstrapper = SessionBootstrapper(manager, identity_gateway)
    return AuthBackend(
        store=store,
        manager=manager,
        bootstrapper=bootstrapper,
        demo_mode=demo_mode,
    )


async def create_auth_backend(settings: Settings) -> AuthBackend:
    """
    Supabase-backed auth when configured, otherwise the in-memory demo.

    If the Supabase client cannot be built (bad URL or key), the app still
    starts: identity and table calls fail and the session stays anonymous.
    """
    if not settings.supabase_configured:
        logger.warning("Supabase not configured, using mock authentication (demo mode)")
        gateway, repo = await seed_demo_backend()
        return build_auth_backend(
            gateway, repo, InMemoryRolePreferenceStore(), settings, demo_mode=True
        )

    try:
        client = await supabase_public(settings)
    except Exception as e:
        logger.error(f"❌ Startup: Supabase client FAILED, continuing anonymous: {e}")
        return build_auth_backend(
            UnavailableIdentityGateway(str(e)),
            UnavailableProfileRepository(str(e)),
            InMemoryRolePreferenceStore(),
            settings,
        )

    return build_auth_backend(
        SupabaseIdentityGateway(client),
        SupabaseProfileRepository(client),
        FileRolePreferenceStore(settings.ROLE_PREFERENCE_PATH),
        settings,
    )
