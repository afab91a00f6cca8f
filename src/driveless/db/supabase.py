"""Shared Supabase client used by the Supabase record store and identity provider."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Return the process-wide Supabase client, or ``None`` when DriveLess has no
    ``DRIVELESS_SUPABASE_URL``/``DRIVELESS_SUPABASE_KEY`` configured.

    Creating the client does not contact Supabase; store and auth calls can still
    fail with network errors and handle that themselves.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase store/identity requested but DRIVELESS_SUPABASE_URL or DRIVELESS_SUPABASE_KEY is missing")
        return None

    try:
        client = create_client(settings.supabase_url, settings.supabase_key)
    except Exception as exc:
        logger.error(f"Could not create Supabase client for {settings.supabase_url}: {exc}")
        return None
    logger.info("Supabase client created")
    return client
