"""
AREABOARD - Configuration
=========================
Settings come from the environment; CLI flags override them.

    AREABOARD_BACKEND          file | memory | supabase   (default: file)
    AREABOARD_DATA_PATH        JSON store path            (default: .areaboard/store.json)
    AREABOARD_TABLE            Supabase key/value table   (default: kv_store)
    AREABOARD_POLL_INTERVAL    watch refresh seconds      (default: 5)
    AREABOARD_LOG_LEVEL        logging level name         (default: WARNING)
    AREABOARD_USER             acting username
    SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY
"""

import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .store import EntityStore, JsonFileStore, MemoryStore, connect_supabase


class BoardSettings(BaseModel):
    """Runtime configuration"""
    backend: Literal["file", "memory", "supabase"] = "file"
    data_path: str = ".areaboard/store.json"
    table: str = "kv_store"
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None
    poll_interval: float = Field(gt=0, default=5.0)
    log_level: str = "WARNING"
    user: Optional[str] = None


ENV_FIELDS = {
    "AREABOARD_BACKEND": "backend",
    "AREABOARD_DATA_PATH": "data_path",
    "AREABOARD_TABLE": "table",
    "AREABOARD_POLL_INTERVAL": "poll_interval",
    "AREABOARD_LOG_LEVEL": "log_level",
    "AREABOARD_USER": "user",
    "SUPABASE_URL": "supabase_url",
    "SUPABASE_SERVICE_ROLE_KEY": "supabase_key",
}


def load_settings(environ: Optional[Mapping[str, str]] = None, **overrides) -> BoardSettings:
    """Build settings from environment variables, then explicit overrides"""
    environ = os.environ if environ is None else environ
    values = {field: environ[var] for var, field in ENV_FIELDS.items() if environ.get(var)}
    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return BoardSettings(**values)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid settings: {e}") from e


def build_store(settings: BoardSettings) -> EntityStore:
    """Entity store for the configured backend"""
    if settings.backend == "memory":
        return MemoryStore()
    if settings.backend == "supabase":
        if not settings.supabase_url or not settings.supabase_key:
            raise ValidationError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required")
        return connect_supabase(settings.supabase_url, settings.supabase_key, table=settings.table)
    return JsonFileStore(settings.data_path)
