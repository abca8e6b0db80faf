# masecurite/services/supabase_client.py

from fastapi import Depends
from supabase import Client, create_client

from masecurite.core.config import Settings, get_settings

_clients: dict[tuple[str, str], Client] = {}


def get_supabase(settings: Settings = Depends(get_settings)) -> Client:
    """
    Lazy Supabase client, one per (url, key) pair.
    Usable directly or as a FastAPI dependency.
    """
    url = settings.supabase_url
    key = settings.supabase_service_role_key

    if not url or not key:
        raise RuntimeError(
            "Supabase configuration missing.\n"
            "Required env vars:\n"
            "- SUPABASE_URL\n"
            "- SUPABASE_SERVICE_ROLE_KEY or SUPABASE_KEY"
        )

    client = _clients.get((url, key))
    if client is None:
        client = create_client(url, key)
        _clients[(url, key)] = client
    return client
