"""Supabase client holding the trees and territories tables."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the shared Supabase client, or None when credentials are missing.

    Creating the client does not contact the server; connection problems
    surface on the first query.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase not configured (TCR_SUPABASE_URL / TCR_SUPABASE_KEY missing)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client for {settings.supabase_url}: {e}")
        return None
