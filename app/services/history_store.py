# app/services/history_store.py
"""OCR result history.

The history is a JSON array of StoredOCRResult, newest first, kept under a
single key of an injected key/value store. Storage failures are logged and
degrade to a no-op; they never reach the caller.
"""
import json
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Protocol

import httpx
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client

from app.config import settings
from app.constants import MAX_STORED_OCR_RESULTS, OCR_RESULTS_STORAGE_KEY
from app.models import OCRDocument, StoredOCRResult
from app.utils import epoch_millis, generate_unique_id

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def clear(self) -> None: ...


class MemoryStore:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


class JsonFileStore:
    """Local fallback: all keys live in one JSON object on disk."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def _write_all(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False)
        os.replace(tmp_path, self.path)

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class StorageError(Exception):
    """A remote key/value store rejected or failed a request."""


class SupabaseStore:
    """Key/value rows in a Supabase table with `key` (primary key) and
    `value` text columns."""

    def __init__(self, client: Client, table: Optional[str] = None):
        self.client = client
        self.table = table or settings.history_table

    def _execute(self, query, action: str):
        try:
            result = query.execute()
        except (APIError, httpx.HTTPError) as e:
            raise StorageError(
                f"Supabase {action} failed on {self.table}: {e}"
            ) from e
        if hasattr(result, "error") and result.error:
            raise StorageError(f"Supabase {action} error: {result.error}")
        return result

    def get(self, key: str) -> Optional[str]:
        result = self._execute(
            self.client.table(self.table).select("value").eq("key", key), "select"
        )
        if not result.data:
            return None
        return result.data[0]["value"]

    def set(self, key: str, value: str) -> None:
        result = self._execute(
            self.client.table(self.table).upsert(
                {"key": key, "value": value}, on_conflict="key"
            ),
            "upsert",
        )
        if not result.data:
            logger.warning(f"Supabase upsert returned empty data for {key}")

    def delete(self, key: str) -> None:
        self._execute(self.client.table(self.table).delete().eq("key", key), "delete")

    def clear(self) -> None:
        # Deletes need a filter; every row has a non-empty key
        self._execute(self.client.table(self.table).delete().neq("key", ""), "delete")


def _dump_results(results: List[StoredOCRResult]) -> str:
    return json.dumps([r.model_dump() for r in results], ensure_ascii=False)


def get_stored_ocr_results(store: KeyValueStore) -> List[StoredOCRResult]:
    try:
        stored = store.get(OCR_RESULTS_STORAGE_KEY)
        if not stored:
            return []
        return [StoredOCRResult(**item) for item in json.loads(stored)]
    except (OSError, ValueError, TypeError, ValidationError, StorageError) as e:
        logger.error(f"Failed to read stored OCR results: {e}")
        return []


def save_ocr_result(
    store: KeyValueStore,
    result: OCRDocument,
    filename: str,
    limit: int = MAX_STORED_OCR_RESULTS,
) -> StoredOCRResult:
    existing = get_stored_ocr_results(store)
    new_result = StoredOCRResult(
        id=generate_unique_id(),
        timestamp=epoch_millis(),
        filename=filename,
        result=result,
    )
    # Newest first; anything past the limit is the oldest and is dropped.
    limited = ([new_result] + existing)[:limit]
    try:
        store.set(OCR_RESULTS_STORAGE_KEY, _dump_results(limited))
    except (OSError, ValueError, StorageError) as e:
        logger.error(f"Failed to save OCR result {filename}: {e}")
    return new_result


def get_stored_ocr_result_by_id(
    store: KeyValueStore, result_id: str
) -> Optional[StoredOCRResult]:
    for result in get_stored_ocr_results(store):
        if result.id == result_id:
            return result
    return None


def delete_stored_ocr_result(store: KeyValueStore, result_id: str) -> bool:
    results = get_stored_ocr_results(store)
    filtered = [r for r in results if r.id != result_id]
    if len(filtered) == len(results):
        return False
    try:
        store.set(OCR_RESULTS_STORAGE_KEY, _dump_results(filtered))
        return True
    except (OSError, ValueError, StorageError) as e:
        logger.error(f"Failed to delete OCR result {result_id}: {e}")
        return False


def clear_all_stored_ocr_results(store: KeyValueStore) -> bool:
    try:
        store.delete(OCR_RESULTS_STORAGE_KEY)
        return True
    except (OSError, ValueError, StorageError) as e:
        logger.error(f"Failed to clear OCR results: {e}")
        return False
