from supabase import create_client, Client
from cortex.config import get_settings


def get_supabase_admin() -> Client:
    """Service role client. Bypasses RLS, so every query must filter on user_id."""
    settings = get_settings()
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key
    )
