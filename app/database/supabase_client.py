from postgrest.exceptions import APIError
from supabase import create_client, Client
from app.config.settings import settings

UNIQUE_VIOLATION = "23505"


class SupabaseClient:
    _client: Client = None
    _service_client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def get_service_client(cls) -> Client:
        """Client with service_role key; bypasses RLS. Falls back to the anon client when no key is set."""
        if cls._service_client is None and settings.supabase_service_role_key:
            cls._service_client = create_client(
                settings.supabase_url, settings.supabase_service_role_key
            )
        return cls._service_client or cls.get_client()

    @classmethod
    def reset_client(cls):
        cls._client = None
        cls._service_client = None


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_service_supabase() -> Client:
    return SupabaseClient.get_service_client()


def is_unique_violation(exc: Exception) -> bool:
    """True when a PostgREST error is a uniqueness conflict (duplicate key)."""
    if isinstance(exc, APIError) and exc.code == UNIQUE_VIOLATION:
        return True
    msg = str(exc).lower()
    return "duplicate key" in msg or "unique constraint" in msg
