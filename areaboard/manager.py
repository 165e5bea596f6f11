"""
AREABOARD - Task Lifecycle Manager
==================================
Create / edit / toggle / claim / delete for sub-points.

Every mutation is validated against the dependency resolver, persisted
through the entity store, and (when it can change completion counts)
followed by a full progress recompute of the affected area.

States per sub-point: incomplete, complete, and blocked, which is derived
live (incomplete AND dependency unsatisfied) and never stored.
"""

from typing import Callable, List, Optional
import logging

from .errors import (
    AlreadyClaimedError, AuthorizationError, CycleError,
    DependencyUnmetError, NotFoundError, ValidationError,
)
from .progress import ProgressAggregator
from .repository import allocate_key, now_millis
from .resolver import is_satisfied, would_create_cycle
from .schema import (
    SubPoint, SubPointEdit, AREA_IDS, SUBPOINT_PREFIX,
    area_id_from_key, subpoint_prefix, timestamp_from_key,
)
from .store import EntityStore

logger = logging.getLogger("areaboard")


class TaskManager:
    """
    Sub-point lifecycle over an entity store.

    The manager holds no state between calls: every operation re-reads what
    it needs, so concurrent managers over the same store stay consistent up
    to the accepted progress race.
    """

    def __init__(
        self,
        store: EntityStore,
        clock: Callable[[], int] = now_millis,
        aggregator: Optional[ProgressAggregator] = None
    ):
        self.store = store
        self.clock = clock
        self.aggregator = aggregator or ProgressAggregator(store)

    # ========================================
    # QUERIES
    # ========================================

    def get(self, subpoint_id: str) -> SubPoint:
        value = self.store.get(subpoint_id) if subpoint_id.startswith(SUBPOINT_PREFIX) else None
        if value is None:
            raise NotFoundError(f"Sub-point not found: {subpoint_id}")
        return SubPoint.from_store(subpoint_id, value)

    def list_subpoints(self, area_id: str) -> List[SubPoint]:
        """Area's sub-points, oldest first"""
        return self._sorted(self.store.scan_by_prefix(subpoint_prefix(area_id)))

    def list_all_subpoints(self) -> List[SubPoint]:
        """Every sub-point in every area (the dependency universe)"""
        return self._sorted(self.store.scan_by_prefix(SUBPOINT_PREFIX))

    @staticmethod
    def _sorted(rows) -> List[SubPoint]:
        subpoints = [SubPoint.from_store(key, value) for key, value in rows]
        return sorted(subpoints, key=lambda sp: (sp.timestamp, sp.id))

    # ========================================
    # MUTATIONS
    # ========================================

    def create(
        self,
        area_id: str,
        title: str,
        created_by: str,
        description: str = "",
        depends_on: Optional[str] = None
    ) -> SubPoint:
        """Add a sub-point to an area"""
        if area_id not in AREA_IDS:
            raise NotFoundError(f"Area not found: {area_id}")
        if not title or not title.strip():
            raise ValidationError("Sub-point title is required")
        if not created_by:
            raise ValidationError("Sub-point creator is required")

        key = allocate_key(self.store, subpoint_prefix(area_id), self.clock)
        if depends_on:
            self._check_dependency(key, depends_on, self.list_all_subpoints())

        subpoint = SubPoint(
            id=key,
            title=title,
            description=description or "",
            created_by=created_by,
            timestamp=timestamp_from_key(key),
            depends_on=depends_on or None,
        )
        self.store.set(key, subpoint.to_store())
        logger.info(f"➕ {created_by} added {subpoint.title} ({key})")

        self.aggregator.refresh(area_id)
        return subpoint

    def edit(self, subpoint_id: str, editor: str, changes: SubPointEdit) -> SubPoint:
        """
        Creator-only edit of title, description and dependency. Completion,
        responsibility, creator and timestamp are never touched here, and
        progress is not recomputed.
        """
        subpoint = self.get(subpoint_id)
        if editor != subpoint.created_by:
            logger.warning(f"⛔ {editor} may not edit {subpoint_id} (created by {subpoint.created_by})")
            raise AuthorizationError(f"Only {subpoint.created_by} can edit this sub-point")

        fields = changes.changes()
        if "title" in fields:
            if not fields["title"] or not fields["title"].strip():
                raise ValidationError("Sub-point title is required")
            subpoint.title = fields["title"]
        if "description" in fields:
            subpoint.description = fields["description"] or ""
        if "depends_on" in fields:
            new_dependency = fields["depends_on"] or None
            # an unchanged link is kept as-is, even if it now dangles
            if new_dependency and new_dependency != subpoint.depends_on:
                self._check_dependency(subpoint_id, new_dependency, self.list_all_subpoints())
            subpoint.depends_on = new_dependency

        self.store.set(subpoint_id, subpoint.to_store())
        logger.info(f"✏️ {editor} edited {subpoint.title} ({subpoint_id})")
        return subpoint

    def toggle_complete(self, subpoint_id: str, actor: str) -> SubPoint:
        """
        Flip completion. Completing is gated on the dependency; un-completing
        is always allowed and never cascades to dependents.
        """
        subpoint = self.get(subpoint_id)

        if not subpoint.completed:
            if not is_satisfied(subpoint, self.list_all_subpoints()):
                logger.warning(f"⛔ {subpoint_id} blocked by: {subpoint.depends_on}")
                raise DependencyUnmetError(
                    f"Complete the dependency first: {subpoint.depends_on}"
                )
            subpoint.completed = True
            logger.info(f"✅ {actor} completed {subpoint.title} ({subpoint_id})")
        else:
            subpoint.completed = False
            logger.info(f"↩️ {actor} reopened {subpoint.title} ({subpoint_id})")

        self.store.set(subpoint_id, subpoint.to_store())
        self.aggregator.refresh(subpoint.area_id)
        return subpoint

    def claim_responsibility(self, subpoint_id: str, actor: str) -> SubPoint:
        """First claim wins; there is no release"""
        if not actor:
            raise ValidationError("Claiming user is required")
        subpoint = self.get(subpoint_id)
        if subpoint.responsible_user:
            raise AlreadyClaimedError(
                f"{subpoint.title} is already claimed by {subpoint.responsible_user}"
            )

        subpoint.responsible_user = actor
        self.store.set(subpoint_id, subpoint.to_store())
        logger.info(f"🙋 {actor} took responsibility for {subpoint.title} ({subpoint_id})")
        return subpoint

    def delete(self, subpoint_id: str, actor: str) -> None:
        """
        Creator-only delete. Sub-points depending on this one are left
        pointing at a missing id and stay blocked. Deleting a missing id is
        a no-op so callers can retry.
        """
        area_id = area_id_from_key(subpoint_id)
        if not subpoint_id.startswith(SUBPOINT_PREFIX) or area_id is None:
            raise ValidationError(f"Not a sub-point id: {subpoint_id}")

        value = self.store.get(subpoint_id)
        if value is not None:
            subpoint = SubPoint.from_store(subpoint_id, value)
            if actor != subpoint.created_by:
                logger.warning(f"⛔ {actor} may not delete {subpoint_id} (created by {subpoint.created_by})")
                raise AuthorizationError(f"Only {subpoint.created_by} can delete this sub-point")
            self.store.delete(subpoint_id)
            logger.info(f"🗑️ {actor} deleted {subpoint.title} ({subpoint_id})")

        self.aggregator.refresh(area_id)

    # ========================================
    # HELPER METHODS
    # ========================================

    def _check_dependency(self, candidate_id: str, depends_on: str, universe: List[SubPoint]) -> None:
        if depends_on == candidate_id:
            raise CycleError(f"{candidate_id} cannot depend on itself")
        if not any(sp.id == depends_on for sp in universe):
            raise ValidationError(f"Dependency not found: {depends_on}")
        if would_create_cycle(candidate_id, depends_on, universe):
            raise CycleError(f"{candidate_id} -> {depends_on} would create a cycle")
