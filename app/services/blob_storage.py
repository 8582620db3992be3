# app/services/blob_storage.py
import logging

from supabase import Client

from app.config import settings

logger = logging.getLogger(__name__)


def upload_blob(
    client: Client,
    data: bytes,
    name: str,
    content_type: str,
    bucket: str = None,
) -> str:
    """Upload `data` to Supabase Storage and return its public URL."""
    bucket_name = bucket or settings.supabase_bucket
    storage = client.storage.from_(bucket_name)
    storage.upload(
        path=name,
        file=data,
        file_options={"content-type": content_type, "upsert": "true"},
    )
    url = storage.get_public_url(name)
    logger.info(f"Uploaded {name} ({len(data)} bytes) to bucket {bucket_name}")
    return url
