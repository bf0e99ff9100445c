"""
Supabase client.

Created once at import from SUPABASE_URL / SUPABASE_KEY. When either is
missing the client is None and the repositories fall back to empty reads.
"""
import logging

from supabase import Client, create_client

from core.config import SUPABASE_KEY, SUPABASE_URL

logger = logging.getLogger("studyhub.db.supabase")


def _create() -> Client | None:
    if not SUPABASE_URL or not SUPABASE_KEY:
        logger.info("Supabase not configured; persistence disabled")
        return None
    return create_client(SUPABASE_URL, SUPABASE_KEY)


supabase = _create()
