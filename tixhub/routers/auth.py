# tixhub/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, status

from tixhub.core.auth import (
    get_auth_backend,
    get_session_manager,
    get_session_store,
    require_auth,
)
from tixhub.core.errors import RoleMutationError
from tixhub.models.profile import Role
from tixhub.schemas.auth import (
    AddRoleRequest,
    AuthModalOpen,
    AuthModalRead,
    AuthModalUpdate,
    LoginRequest,
    RegisterRead,
    RegisterRequest,
    SessionRead,
    SwitchRoleRequest,
)
from tixhub.services.auth_backend import AuthBackend
from tixhub.services.role_session import RoleSessionManager
from tixhub.services.session_store import SessionStore

router = APIRouter(prefix="/auth", tags=["Auth"])

_ROLE_ERROR_STATUS = {
    "not_authenticated": status.HTTP_401_UNAUTHORIZED,
    "role_exists": status.HTTP_409_CONFLICT,
    "storage_failed": status.HTTP_502_BAD_GATEWAY,
}


def _raise_role_error(error: RoleMutationError) -> None:
    raise HTTPException(
        status_code=_ROLE_ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
        detail={"code": error.code, "message": error.message},
    )


# -------- Session --------


@router.get("/session", response_model=SessionRead)
def read_session(store: SessionStore = Depends(get_session_store)):
    """
    Current session state and, when authenticated, the AuthUser
    (current role, all role profiles, data for the current role).
    """
    return SessionRead.from_state(store.state)


@router.post("/login", response_model=SessionRead)
async def login(
    payload: LoginRequest,
    backend: AuthBackend = Depends(get_auth_backend),
):
    """
    Password sign-in.

    The backend's error message is returned as-is (e.g. "Invalid login
    credentials"). The user itself is resolved from the SIGNED_IN
    notification; the response waits for that and returns the new session.
    """
    result = await backend.manager.login(payload.email, payload.password)
    if result.error is not None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=result.error.message,
        )
    await backend.bootstrapper.settle()
    return SessionRead.from_state(backend.store.state)


@router.post("/register", response_model=RegisterRead)
async def register(
    payload: RegisterRequest,
    backend: AuthBackend = Depends(get_auth_backend),
):
    """
    Sign up as Client or Organizer.

    Profile fields are staged in signup metadata; the profile row is
    created on first login. `needs_confirmation` is true when the backend
    wants the email confirmed first.
    """
    result = await backend.manager.register(
        Role(payload.role), payload, payload.email, payload.password
    )
    if result.error is not None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.error.message,
        )
    await backend.bootstrapper.settle()
    return RegisterRead(needs_confirmation=result.needs_confirmation)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(backend: AuthBackend = Depends(get_auth_backend)):
    """Sign out. The session is cleared locally even if the backend call fails."""
    await backend.manager.logout()
    await backend.bootstrapper.settle()


# -------- Roles --------


@router.post(
    "/roles/switch",
    response_model=SessionRead,
    dependencies=[Depends(require_auth)],
)
async def switch_role(
    payload: SwitchRoleRequest,
    manager: RoleSessionManager = Depends(get_session_manager),
):
    """Switch the current role among the roles already provisioned."""
    result = manager.switch_role(payload.role)
    if result.error is not None:
        _raise_role_error(result.error)
    return SessionRead.from_state(manager.store.state)


@router.post(
    "/roles",
    response_model=SessionRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_auth)],
)
async def add_role(
    payload: AddRoleRequest,
    manager: RoleSessionManager = Depends(get_session_manager),
):
    """
    Provision a Client or Organizer profile for the logged-in identity and
    make it the current role. 409 if that role already exists.
    """
    result = await manager.add_role(Role(payload.role), payload)
    if result.error is not None:
        _raise_role_error(result.error)
    return SessionRead.from_state(manager.store.state)


# -------- Login/register modal --------


@router.get("/modal", response_model=AuthModalRead)
def read_modal(backend: AuthBackend = Depends(get_auth_backend)):
    return backend.modal.read()


@router.post("/modal/open", response_model=AuthModalRead)
def open_modal(payload: AuthModalOpen, backend: AuthBackend = Depends(get_auth_backend)):
    backend.modal.open(payload.tab, payload.role)
    return backend.modal.read()


@router.post("/modal/close", response_model=AuthModalRead)
def close_modal(backend: AuthBackend = Depends(get_auth_backend)):
    backend.modal.close()
    return backend.modal.read()


@router.patch("/modal", response_model=AuthModalRead)
def update_modal(payload: AuthModalUpdate, backend: AuthBackend = Depends(get_auth_backend)):
    if payload.tab is not None:
        backend.modal.set_tab(payload.tab)
    if payload.role is not None:
        backend.modal.set_role(payload.role)
    return backend.modal.read()
