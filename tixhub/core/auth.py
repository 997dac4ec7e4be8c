# tixhub/core/auth.py
from fastapi import Depends, HTTPException, Request, status

from tixhub.models.profile import AuthUser
from tixhub.services.auth_backend import AuthBackend
from tixhub.services.role_session import RoleSessionManager
from tixhub.services.session_store import SessionStore


def get_auth_backend(request: Request) -> AuthBackend:
    """The per-process auth wiring created in the app lifespan."""
    return request.app.state.auth


def get_session_manager(backend: AuthBackend = Depends(get_auth_backend)) -> RoleSessionManager:
    return backend.manager


def get_session_store(backend: AuthBackend = Depends(get_auth_backend)) -> SessionStore:
    return backend.store


def get_current_user(store: SessionStore = Depends(get_session_store)) -> AuthUser | None:
    """
    Current AuthUser, or None for guests (anonymous / unprovisioned).
    """
    return store.current_user


def require_auth(user: AuthUser | None = Depends(get_current_user)) -> AuthUser:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if nobody is logged in.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user
