"""Singleton Supabase client for the profile store."""
import logging
from supabase import create_client, Client

from config import settings

logger = logging.getLogger(__name__)

_client: Client | None = None


def get_supabase_client() -> Client:
    """Get or create the Supabase client singleton.

    Uses SUPABASE_SERVICE_ROLE_KEY (bypasses RLS); every query is scoped
    to the authenticated user_id by the store.
    """
    global _client
    if _client is None:
        url = settings.SUPABASE_URL
        key = settings.SUPABASE_SERVICE_ROLE_KEY
        if not url or not key:
            raise RuntimeError(
                "SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in environment"
            )
        _client = create_client(url, key)
        logger.info(f"Supabase client initialized for {url}")
    return _client


def set_supabase_client(client: Client | None) -> None:
    """Replace the shared client (None forces re-creation on next use)."""
    global _client
    _client = client
