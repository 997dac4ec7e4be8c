# tixhub/core/supabase_client.py
from supabase import AsyncClient, acreate_client

from tixhub.core.config import Settings


async def supabase_public(settings: Settings) -> AsyncClient:
    """
    Create an async Supabase client with the anon/public key.

    Use cases:
      - password sign-up / sign-in / sign-out and session restore
      - auth state change notifications
      - reading and inserting rows in `customers` / `organizers`

    Note: This client respects RLS. Row-level access control is enforced
    by the backend policies, not by this application.

    Raises:
        RuntimeError: if SUPABASE_URL or SUPABASE_KEY is not set.
    """
    if not settings.supabase_configured:
        raise RuntimeError("Missing SUPABASE_URL or SUPABASE_KEY in .env")
    return await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
