# tixhub/repositories/profile_repo.py
from typing import Any, Protocol

from supabase import AsyncClient, PostgrestAPIError

from tixhub.core.errors import ProfileStorageError
from tixhub.models.profile import ClientProfile, OrganizerProfile

CUSTOMERS_TABLE = "customers"
ORGANIZERS_TABLE = "organizers"


class ProfileRepository(Protocol):
    """
    Data access for the two role-profile tables.

    Responsibilities:
      - Pure storage operations keyed by identity id
      - No session state, no business rules

    Inserts return nothing: callers re-select to get the stored row
    (ids and timestamps are assigned by the backend).
    """

    async def get_customer(self, identity_id: str) -> ClientProfile | None: ...

    async def get_organizer(self, identity_id: str) -> OrganizerProfile | None: ...

    async def insert_customer(self, row: dict[str, Any]) -> None: ...

    async def insert_organizer(self, row: dict[str, Any]) -> None: ...


class SupabaseProfileRepository:
    """
    ProfileRepository over Supabase PostgREST tables `customers` and
    `organizers`. Every failure surfaces as ProfileStorageError.
    """

    def __init__(self, client: AsyncClient):
        self.client = client

    async def _select_one(self, table: str, identity_id: str) -> dict[str, Any] | None:
        try:
            resp = await (
                self.client.table(table)
                .select("*")
                .eq("supabase_user_id", identity_id)
                .limit(1)
                .execute()
            )
        except PostgrestAPIError as exc:
            raise ProfileStorageError(exc.message or str(exc)) from exc
        rows = resp.data or []
        return rows[0] if rows else None

    async def _insert(self, table: str, row: dict[str, Any]) -> None:
        try:
            await self.client.table(table).insert(row).execute()
        except PostgrestAPIError as exc:
            raise ProfileStorageError(exc.message or str(exc)) from exc

    async def get_customer(self, identity_id: str) -> ClientProfile | None:
        row = await self._select_one(CUSTOMERS_TABLE, identity_id)
        return ClientProfile.model_validate(row) if row else None

    async def get_organizer(self, identity_id: str) -> OrganizerProfile | None:
        row = await self._select_one(ORGANIZERS_TABLE, identity_id)
        return OrganizerProfile.model_validate(row) if row else None

    async def insert_customer(self, row: dict[str, Any]) -> None:
        await self._insert(CUSTOMERS_TABLE, row)

    async def insert_organizer(self, row: dict[str, Any]) -> None:
        await self._insert(ORGANIZERS_TABLE, row)
