"""
AREABOARD - Progress Aggregator
===============================
Area progress is a pure function of the area's current sub-points. It is
recomputed from scratch after every mutation that can change it and written
back with a plain read-modify-write; a lost update heals on the next write.
"""

from typing import Iterable
import logging

from .schema import Area, SubPoint, area_key, subpoint_prefix
from .store import EntityStore

logger = logging.getLogger("areaboard.progress")


def recompute(area_id: str, subpoints: Iterable[SubPoint]) -> int:
    """
    Percent of completed sub-points, rounded half up (12.5 -> 13).
    Empty areas are 0%.
    """
    total = 0
    completed = 0
    for sp in subpoints:
        total += 1
        if sp.completed:
            completed += 1
    if total == 0:
        return 0
    # floor(100 * completed / total + 1/2) in integers
    return (200 * completed + total) // (2 * total)


class ProgressAggregator:
    """Recomputes and persists an area's progress field"""

    def __init__(self, store: EntityStore):
        self.store = store

    def persist(self, area_id: str, percent: int) -> None:
        """Overwrite only the progress field of the stored area"""
        key = area_key(area_id)
        value = self.store.get(key)
        if value is None:
            logger.warning(f"Area not found, progress not stored: {area_id}")
            return
        area = Area.from_store(key, value)
        area.progress = percent
        self.store.set(key, area.to_store())

    def refresh(self, area_id: str) -> int:
        """Scan the area, recompute, persist"""
        subpoints = [
            SubPoint.from_store(key, value)
            for key, value in self.store.scan_by_prefix(subpoint_prefix(area_id))
        ]
        percent = recompute(area_id, subpoints)
        self.persist(area_id, percent)
        logger.debug(f"📊 Area {area_id}: {percent}% ({len(subpoints)} sub-points)")
        return percent
