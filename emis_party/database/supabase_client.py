import logging
from typing import Optional

from postgrest.exceptions import APIError
from supabase import create_client, Client

from emis_party.config import settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    _client: Optional[Client] = None
    _service_client: Optional[Client] = None

    @staticmethod
    def _create(key: Optional[str]) -> Client:
        if not settings.supabase_url or not key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_KEY must be configured")
        logger.info("Connecting to Supabase at %s", settings.supabase_url)
        return create_client(settings.supabase_url, key)

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = cls._create(settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Use in seed scripts."""
        if cls._service_client is None:
            if not settings.supabase_service_role_key:
                logger.warning("SUPABASE_SERVICE_ROLE_KEY is not set, falling back to SUPABASE_KEY")
                return cls.get_client()
            cls._service_client = cls._create(settings.supabase_service_role_key)
        return cls._service_client

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def ping(supabase: Client, table: str) -> bool:
    """True when the table answers a one-row select"""
    try:
        supabase.table(table).select("id").limit(1).execute()
    except APIError as e:
        logger.warning("Supabase ping on %s failed: %s", table, e.message)
        return False
    return True
