"""
AREABOARD - Entity Store Adapters
=================================
Thin get/set/delete/scan-by-prefix wrappers over the key/value collaborator.
No business logic lives here.

Backends:
- MemoryStore:    in-process dict (tests, embedding)
- JsonFileStore:  single JSON document on disk (CLI default)
- SupabaseStore:  key/value table behind a Supabase client
"""

import copy
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, List, Dict, Any, Tuple
import logging

from .errors import StoreError

logger = logging.getLogger("areaboard.store")

Record = Dict[str, Any]


class EntityStore(ABC):
    """Key/value collaborator contract"""

    @abstractmethod
    def get(self, key: str) -> Optional[Record]:
        """Value stored under key, or None"""

    @abstractmethod
    def set(self, key: str, value: Record) -> None:
        """Create or overwrite key"""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; missing keys are a no-op"""

    @abstractmethod
    def scan_by_prefix(self, prefix: str) -> List[Tuple[str, Record]]:
        """All (key, value) pairs whose key starts with prefix, unordered"""


class MemoryStore(EntityStore):
    """Dict-backed store; values are copied in and out"""

    def __init__(self, data: Optional[Dict[str, Record]] = None):
        self._data: Dict[str, Record] = copy.deepcopy(data) if data else {}

    def get(self, key: str) -> Optional[Record]:
        value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    def set(self, key: str, value: Record) -> None:
        self._data[key] = copy.deepcopy(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def scan_by_prefix(self, prefix: str) -> List[Tuple[str, Record]]:
        return [
            (key, copy.deepcopy(value))
            for key, value in self._data.items()
            if key.startswith(prefix)
        ]

    def __len__(self) -> int:
        return len(self._data)


class JsonFileStore(EntityStore):
    """
    Whole key space in one JSON file.

    Each call re-reads the file so separate CLI invocations observe each
    other's writes; writes go through a temp file and os.replace.
    """

    def __init__(self, path: str = ".areaboard/store.json"):
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"Cannot create store directory {self.path.parent}: {e}") from e

    def _load(self) -> Dict[str, Record]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StoreError(f"Corrupt store file {self.path}: expected an object")
        return data

    def _dump(self, data: Dict[str, Record]) -> None:
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False, default=str)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StoreError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[Record]:
        return self._load().get(key)

    def set(self, key: str, value: Record) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)

    def scan_by_prefix(self, prefix: str) -> List[Tuple[str, Record]]:
        return [(k, v) for k, v in self._load().items() if k.startswith(prefix)]


class SupabaseStore(EntityStore):
    """
    Key/value table behind a Supabase client.

    The table needs a text ``key`` primary key and a jsonb ``value`` column.
    Any client failure surfaces as StoreError; retries belong to the client.
    """

    def __init__(self, client: Any, table: str = "kv_store"):
        self.client = client
        self.table = table

    def _query(self):
        return self.client.table(self.table)

    def get(self, key: str) -> Optional[Record]:
        try:
            response = self._query().select("key, value").eq("key", key).limit(1).execute()
        except Exception as e:
            raise StoreError(f"Supabase get failed for {key}: {e}") from e
        rows = response.data or []
        return rows[0]["value"] if rows else None

    def set(self, key: str, value: Record) -> None:
        try:
            self._query().upsert({"key": key, "value": value}).execute()
        except Exception as e:
            raise StoreError(f"Supabase set failed for {key}: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self._query().delete().eq("key", key).execute()
        except Exception as e:
            raise StoreError(f"Supabase delete failed for {key}: {e}") from e

    def scan_by_prefix(self, prefix: str) -> List[Tuple[str, Record]]:
        try:
            response = self._query().select("key, value").like("key", prefix + "%").execute()
        except Exception as e:
            raise StoreError(f"Supabase scan failed for {prefix}: {e}") from e
        # LIKE treats "_" as a wildcard
        return [
            (row["key"], row["value"])
            for row in (response.data or [])
            if row["key"].startswith(prefix)
        ]


def connect_supabase(url: str, key: str, table: str = "kv_store") -> SupabaseStore:
    """Create a Supabase client and wrap it"""
    from supabase import create_client

    try:
        client = create_client(url, key)
    except Exception as e:
        raise StoreError(f"Cannot connect to Supabase at {url}: {e}") from e
    logger.info(f"🔌 Connected to Supabase table {table}")
    return SupabaseStore(client, table=table)
