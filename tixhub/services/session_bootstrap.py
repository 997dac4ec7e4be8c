# tixhub/services/session_bootstrap.py
import asyncio
import logging

from tixhub.models.profile import Identity
from tixhub.models.session import AuthState
from tixhub.repositories.identity_gateway import IdentityGateway, Unsubscribe
from tixhub.services.role_session import RoleSessionManager

logger = logging.getLogger(__name__)


class SessionBootstrapper:
    """
    Startup and lifetime wiring between the identity backend and the
    RoleSessionManager.

    start():
      - subscribe to auth change notifications (kept until stop())
      - restore an existing session, if any, and resolve it
      - never raises: a backend outage leaves the user anonymous

    Notifications arrive through a plain callback; each one is handled in
    its own task on the running loop.
    """

    def __init__(self, manager: RoleSessionManager, identity_gateway: IdentityGateway):
        self.manager = manager
        self.identity_gateway = identity_gateway
        self._unsubscribe: Unsubscribe | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    async def start(self) -> AuthState:
        try:
            self._unsubscribe = self.identity_gateway.on_auth_state_change(self._on_auth_change)
            identity = await self.identity_gateway.get_session_identity()
            return await self.manager.resolve(identity)
        except Exception as e:
            logger.error(f"Session bootstrap failed, continuing anonymous: {e}")
            return await self.manager.resolve(None)

    def _on_auth_change(self, event: str, identity: Identity | None) -> None:
        task = asyncio.get_running_loop().create_task(self._handle(event, identity))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _handle(self, event: str, identity: Identity | None) -> None:
        try:
            await self.manager.apply_auth_change(event, identity)
        except Exception:
            logger.exception("Failed to handle auth event %s", event)

    async def settle(self) -> None:
        """Wait until every notification received so far has been handled."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
