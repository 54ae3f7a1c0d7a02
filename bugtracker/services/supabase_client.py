"""
Supabase Connection
===================
Lazily builds the shared supabase-py client from Settings.

The client is only created on first use so the API can start (and its
input validation can run) without credentials; a missing URL/key surfaces
as an UpstreamError on the first storage or datastore call instead.
"""
import logging
from typing import Optional

from supabase import Client, create_client

from bugtracker.core.config import Settings
from bugtracker.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class SupabaseConnection:

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._client: Optional[Client] = None

    @property
    def client(self) -> Client:
        if self._client is None:
            if not self._settings.supabase_configured:
                raise UpstreamError("Supabase is not configured (SUPABASE_URL / SUPABASE_ANON_KEY)")
            logger.info("Connecting to Supabase at %s", self._settings.supabase_url)
            self._client = create_client(self._settings.supabase_url, self._settings.supabase_key)
        return self._client


def error_message(exc: Exception) -> str:
    """Best-effort human message from supabase/postgrest/storage exceptions."""
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    return str(exc) or exc.__class__.__name__
