"""
AREABOARD - Schema Definition
=============================
Areas, sub-points (tasks) and comments as stored in the key/value space.

Stored values use camelCase field names (createdBy, dependsOn, ...). The
record id is the store key itself and is never repeated inside the value.
"""

from enum import Enum
from typing import Optional, List, Dict, Any, Tuple
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .errors import StoreError


AREA_PREFIX = "project-area:"
SUBPOINT_PREFIX = "subpoint:"
COMMENT_PREFIX = "comment:"


def area_key(area_id: str) -> str:
    return f"{AREA_PREFIX}{area_id}"


def subpoint_prefix(area_id: str) -> str:
    return f"{SUBPOINT_PREFIX}{area_id}:"


def comment_prefix(area_id: str) -> str:
    return f"{COMMENT_PREFIX}{area_id}:"


def area_id_from_key(key: str) -> Optional[str]:
    """Area id embedded in a ``subpoint:`` or ``comment:`` key, if any"""
    parts = key.split(":")
    if len(parts) >= 3 and parts[1]:
        return parts[1]
    return None


def timestamp_from_key(key: str) -> int:
    """Creation millis embedded at the end of a key (0 if unparseable)"""
    try:
        return int(key.rsplit(":", 1)[-1])
    except ValueError:
        return 0


class StoredRecord(BaseModel):
    """Base for everything persisted through the entity store"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str

    @classmethod
    def from_store(cls, key: str, value: Dict[str, Any]):
        return cls._load(key, key, value)

    @classmethod
    def _load(cls, key: str, record_id: str, value: Dict[str, Any]):
        try:
            data = dict(value)
            data["id"] = record_id
            return cls.model_validate(data)
        except (PydanticValidationError, TypeError, ValueError) as e:
            raise StoreError(f"Malformed record {key}: {e}") from e

    def to_store(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})


class Area(StoredRecord):
    """Named partition of project work"""
    name: str
    description: str = ""
    progress: int = Field(ge=0, le=100, default=0)  # derived, written by the aggregator only

    @classmethod
    def from_store(cls, key: str, value: Dict[str, Any]) -> "Area":
        # legacy records carry their own short id inside the value
        record_id = key[len(AREA_PREFIX):] if key.startswith(AREA_PREFIX) else key
        return cls._load(key, record_id, value)


class SubPoint(StoredRecord):
    """Individual task within an area"""
    title: str
    description: str = ""
    completed: bool = False
    created_by: str
    timestamp: int                          # creation epoch millis
    depends_on: Optional[str] = None        # sub-point id, any area
    responsible_user: Optional[str] = None  # first claim wins

    @property
    def area_id(self) -> Optional[str]:
        return area_id_from_key(self.id)


class Comment(StoredRecord):
    """Append-only discussion entry"""
    username: str
    message: str
    timestamp: int


class SubPointState(str, Enum):
    """Display state; BLOCKED is derived, never stored"""
    INCOMPLETE = "incomplete"
    BLOCKED = "blocked"
    COMPLETE = "complete"


class SubPointEdit(BaseModel):
    """
    Creator edit of a sub-point.

    Only fields that were explicitly supplied are applied, so passing
    ``depends_on=None`` clears the dependency while omitting it keeps it.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    depends_on: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in self.model_fields_set}


class SubPointStatus(BaseModel):
    """Sub-point paired with its live dependency state"""
    subpoint: SubPoint
    state: SubPointState
    dependency_title: Optional[str] = None
    dependency_area: Optional[str] = None
    dangling: bool = False   # dependency points at a deleted sub-point


class DashboardStats(BaseModel):
    """Board-wide totals"""
    areas: List[Area] = Field(default_factory=list)
    total_comments: int = 0
    total_subpoints: int = 0
    completed_subpoints: int = 0


# ============================================================
# AREA CATALOG
# ============================================================

DEFAULT_AREAS: Tuple[Dict[str, str], ...] = (
    {
        "id": "ai",
        "name": "AI",
        "description": "Desarrollo e implementación de IA",
    },
    {
        "id": "hardware-code",
        "name": "Hardware & Code",
        "description": "Desarrollo de hardware y código",
    },
    {
        "id": "interfaz",
        "name": "Interfaz",
        "description": "Diseño y desarrollo de interfaz de usuario",
    },
    {
        "id": "base-datos",
        "name": "Base de Datos",
        "description": "Arquitectura y gestión de datos",
    },
    {
        "id": "impresion",
        "name": "Impresión (encapsulación)",
        "description": "Impresión 3D y encapsulación",
    },
)

AREA_IDS = tuple(a["id"] for a in DEFAULT_AREAS)


def area_name(area_id: Optional[str]) -> str:
    """Display name for an area id, falling back to the id itself"""
    for area in DEFAULT_AREAS:
        if area["id"] == area_id:
            return area["name"]
    return area_id or ""
