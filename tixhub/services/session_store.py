# tixhub/services/session_store.py
import logging
from typing import Callable

from tixhub.models.profile import AuthUser
from tixhub.models.session import AuthState, Authenticated, Unresolved

logger = logging.getLogger(__name__)

Listener = Callable[[AuthState], None]


class SessionStore:
    """
    Observable holder of the current AuthState.

    Readers get the store injected and read `state` / `current_user`, or
    subscribe for changes. Only the RoleSessionManager calls `publish`.
    """

    def __init__(self):
        self._state: AuthState = Unresolved()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    @property
    def current_user(self) -> AuthUser | None:
        if isinstance(self._state, Authenticated):
            return self._state.user
        return None

    @property
    def is_loading(self) -> bool:
        """True until bootstrap has decided between a user and no user."""
        return isinstance(self._state, Unresolved)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, state: AuthState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                # A broken reader must not stop the others from updating
                logger.exception("Session listener failed")
