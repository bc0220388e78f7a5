from supabase import create_client, Client
from familyhub.config import settings
from familyhub.core.errors import ServiceNotConfigured
from typing import Optional
import logging

logger = logging.getLogger(__name__)


class SupabaseClient:
    """
    One supabase-py client per process.

    The service-role key is preferred: it bypasses row level security, and
    AccessGateway enforces group membership on every request instead. With
    only the anon key, reads are limited by whatever RLS policies exist.
    """
    _client: Optional[Client] = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            key = settings.supabase_service_role_key or settings.supabase_key
            if not settings.supabase_url or not key:
                raise ServiceNotConfigured("Database is not configured")
            if not settings.supabase_service_role_key:
                logger.warning("SUPABASE_SERVICE_ROLE_KEY is not set; using the anon key")
            cls._client = create_client(settings.supabase_url, key)
        return cls._client


def get_supabase() -> Client:
    return SupabaseClient.get_client()
