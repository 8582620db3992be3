from typing import Callable

from supabase import create_client, Client
from fastapi import HTTPException

from .config import settings
from .services.blob_storage import upload_blob
from .services.history_store import JsonFileStore, KeyValueStore, SupabaseStore

_supabase_client: Client = None
_history_store: KeyValueStore = None

Uploader = Callable[[bytes, str, str], str]


def get_supabase_client() -> Client:
    global _supabase_client
    if _supabase_client is None:
        if not settings.supabase_url or not settings.supabase_key:
            raise HTTPException(
                status_code=500,
                detail="Supabase URL or Key not configured in .env file",
            )
        try:
            _supabase_client = create_client(
                settings.supabase_url, settings.supabase_key
            )
        except Exception as e:
            raise HTTPException(
                status_code=500,
                detail=f"Failed to initialize Supabase client: {str(e)}",
            )
    return _supabase_client


def get_uploader() -> Uploader:
    client = get_supabase_client()

    def _upload(data: bytes, name: str, content_type: str) -> str:
        return upload_blob(client, data, name, content_type)

    return _upload


def supabase_configured() -> bool:
    return bool(settings.supabase_url and settings.supabase_key)


def get_history_store() -> KeyValueStore:
    global _history_store
    if _history_store is None:
        backend = settings.history_backend
        if backend == "supabase" or (backend == "auto" and supabase_configured()):
            _history_store = SupabaseStore(
                get_supabase_client(), settings.history_table
            )
        else:
            _history_store = JsonFileStore(settings.history_path)
    return _history_store
