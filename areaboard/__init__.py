"""
AREABOARD - Collaborative Project Areas
=======================================

Project work split into a fixed set of areas. Each area holds sub-points
(tasks); a sub-point may depend on one other sub-point in any area and can
only be completed once that dependency is. Area progress is recomputed
from the live sub-point set after every relevant change.

Usage:
    from areaboard import ProjectBoard, MemoryStore

    board = ProjectBoard(MemoryStore())
    train = board.create_subpoint("ai", "Train model", created_by="Ximena").data
    deploy = board.create_subpoint(
        "ai", "Deploy", created_by="Ximena", depends_on=train.id
    ).data

    board.toggle_complete(deploy.id, actor="Andres")   # fails: dependency_unmet
    board.toggle_complete(train.id, actor="Andres")    # ai -> 50%
    board.toggle_complete(deploy.id, actor="Andres")   # ai -> 100%
"""

from .schema import (
    Area,
    SubPoint,
    Comment,
    SubPointState,
    SubPointEdit,
    SubPointStatus,
    DashboardStats,
    DEFAULT_AREAS,
)
from .errors import (
    AreaBoardError,
    ValidationError,
    CycleError,
    DependencyUnmetError,
    AuthorizationError,
    AlreadyClaimedError,
    NotFoundError,
    StoreError,
)
from .store import EntityStore, MemoryStore, JsonFileStore, SupabaseStore
from .resolver import is_satisfied, would_create_cycle
from .progress import ProgressAggregator, recompute
from .manager import TaskManager
from .api import ProjectBoard, Result

__version__ = "1.0.0"
__all__ = [
    "ProjectBoard",
    "Result",
    "TaskManager",
    "ProgressAggregator",
    "recompute",
    "is_satisfied",
    "would_create_cycle",
    "EntityStore",
    "MemoryStore",
    "JsonFileStore",
    "SupabaseStore",
    "Area",
    "SubPoint",
    "Comment",
    "SubPointState",
    "SubPointEdit",
    "SubPointStatus",
    "DashboardStats",
    "DEFAULT_AREAS",
    "AreaBoardError",
    "ValidationError",
    "CycleError",
    "DependencyUnmetError",
    "AuthorizationError",
    "AlreadyClaimedError",
    "NotFoundError",
    "StoreError",
]
