"""
AREABOARD - Board API
=====================
Operations consumed by a UI or HTTP layer. Each call returns a tagged
Result instead of raising, so the caller can decide how to message the
failure. Only board errors are converted; anything else propagates.
"""

from typing import Any, Callable, Dict, Optional, Union
import logging

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import AreaBoardError, ValidationError
from .manager import TaskManager
from .repository import AreaRepository, CommentRepository, now_millis
from .resolver import describe
from .schema import DashboardStats, SubPointEdit, AREA_IDS
from .store import EntityStore

logger = logging.getLogger("areaboard")


class Result(BaseModel):
    """Tagged success/failure outcome"""
    success: bool
    data: Any = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @classmethod
    def ok(cls, data: Any = None) -> "Result":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: AreaBoardError) -> "Result":
        return cls(success=False, error=str(error), error_kind=error.kind)


class ProjectBoard:
    """
    Collaborative project board.

    Usage:
        board = ProjectBoard(MemoryStore())
        result = board.create_subpoint("ai", "Train model", created_by="Ximena")
        board.toggle_complete(result.data.id, actor="Andres")
        board.get_area("ai").data.progress   # -> 100
    """

    def __init__(self, store: EntityStore, clock: Callable[[], int] = now_millis):
        self.store = store
        self.areas = AreaRepository(store)
        self.comments = CommentRepository(store, clock=clock)
        self.tasks = TaskManager(store, clock=clock)

    def _call(self, operation: Callable[[], Any]) -> Result:
        try:
            self.areas.ensure_initialized()
            return Result.ok(operation())
        except AreaBoardError as e:
            logger.debug(f"{e.kind}: {e}")
            return Result.fail(e)

    # ========================================
    # AREAS
    # ========================================

    def initialize(self) -> Result:
        return self._call(self.areas.initialize)

    def list_areas(self) -> Result:
        return self._call(self.areas.list)

    def get_area(self, area_id: str) -> Result:
        return self._call(lambda: self.areas.get(area_id))

    # ========================================
    # SUB-POINTS
    # ========================================

    def list_subpoints(self, area_id: str) -> Result:
        return self._call(lambda: self.tasks.list_subpoints(area_id))

    def list_all_subpoints(self) -> Result:
        return self._call(self.tasks.list_all_subpoints)

    def subpoint_statuses(self, area_id: str) -> Result:
        """Area's sub-points with live blocked state and dependency labels"""
        def run():
            universe = self.tasks.list_all_subpoints()
            own = [sp for sp in universe if sp.area_id == area_id]
            return describe(own, universe)
        return self._call(run)

    def create_subpoint(
        self,
        area_id: str,
        title: str,
        created_by: str,
        description: str = "",
        depends_on: Optional[str] = None
    ) -> Result:
        return self._call(lambda: self.tasks.create(
            area_id, title, created_by, description=description, depends_on=depends_on
        ))

    def edit_subpoint(
        self,
        subpoint_id: str,
        editor: str,
        fields: Union[SubPointEdit, Dict[str, Any]]
    ) -> Result:
        def run():
            if isinstance(fields, SubPointEdit):
                changes = fields
            else:
                try:
                    changes = SubPointEdit.model_validate(fields)
                except PydanticValidationError as e:
                    raise ValidationError(f"Invalid sub-point fields: {e}") from e
            return self.tasks.edit(subpoint_id, editor, changes)
        return self._call(run)

    def toggle_complete(self, subpoint_id: str, actor: str) -> Result:
        return self._call(lambda: self.tasks.toggle_complete(subpoint_id, actor))

    def claim_responsibility(self, subpoint_id: str, actor: str) -> Result:
        return self._call(lambda: self.tasks.claim_responsibility(subpoint_id, actor))

    def delete_subpoint(self, subpoint_id: str, actor: str) -> Result:
        return self._call(lambda: self.tasks.delete(subpoint_id, actor))

    # ========================================
    # COMMENTS
    # ========================================

    def list_comments(self, area_id: str) -> Result:
        return self._call(lambda: self.comments.list(area_id))

    def add_comment(self, area_id: str, username: str, message: str) -> Result:
        return self._call(lambda: self.comments.add(area_id, username, message))

    # ========================================
    # REPORTING
    # ========================================

    def dashboard(self) -> Result:
        """Areas plus board-wide comment and task totals"""
        def run():
            subpoints = self.tasks.list_all_subpoints()
            return DashboardStats(
                areas=self.areas.list(),
                total_comments=sum(len(self.comments.list(a)) for a in AREA_IDS),
                total_subpoints=len(subpoints),
                completed_subpoints=sum(1 for sp in subpoints if sp.completed),
            )
        return self._call(run)
