"""
AREABOARD - Area & Comment Repository
=====================================
Plain CRUD over the entity store. No dependency or progress logic.
"""

import time
from typing import Callable, List
import logging

from .errors import NotFoundError, ValidationError
from .schema import (
    Area, Comment, DEFAULT_AREAS, AREA_IDS, AREA_PREFIX,
    area_key, comment_prefix, timestamp_from_key,
)
from .store import EntityStore

logger = logging.getLogger("areaboard.repository")


def now_millis() -> int:
    return int(time.time() * 1000)


def allocate_key(store: EntityStore, prefix: str, clock: Callable[[], int]) -> str:
    """``{prefix}{millis}``, bumped one millisecond at a time until free"""
    stamp = clock()
    while store.get(f"{prefix}{stamp}") is not None:
        stamp += 1
    return f"{prefix}{stamp}"


class AreaRepository:
    """Fixed catalog of project areas"""

    def __init__(self, store: EntityStore):
        self.store = store
        self._initialized = False

    def initialize(self) -> List[Area]:
        """
        Upsert the default catalog. Names and descriptions are refreshed,
        stored progress is kept, so running this again is harmless.
        """
        areas = []
        for entry in DEFAULT_AREAS:
            key = area_key(entry["id"])
            existing = self.store.get(key)
            progress = Area.from_store(key, existing).progress if existing else 0
            area = Area(progress=progress, **entry)
            self.store.set(key, area.to_store())
            areas.append(area)
        self._initialized = True
        logger.info(f"🗂️ Initialized {len(areas)} project areas")
        return areas

    def ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def list(self) -> List[Area]:
        self.ensure_initialized()
        areas = [Area.from_store(k, v) for k, v in self.store.scan_by_prefix(AREA_PREFIX)]
        order = {area_id: i for i, area_id in enumerate(AREA_IDS)}
        return sorted(areas, key=lambda a: (order.get(a.id, len(order)), a.id))

    def get(self, area_id: str) -> Area:
        self.ensure_initialized()
        key = area_key(area_id)
        value = self.store.get(key)
        if value is None:
            raise NotFoundError(f"Area not found: {area_id}")
        return Area.from_store(key, value)


class CommentRepository:
    """Append-only comment log per area"""

    def __init__(self, store: EntityStore, clock: Callable[[], int] = now_millis):
        self.store = store
        self.clock = clock

    def list(self, area_id: str) -> List[Comment]:
        """Newest first"""
        comments = [
            Comment.from_store(k, v)
            for k, v in self.store.scan_by_prefix(comment_prefix(area_id))
        ]
        return sorted(comments, key=lambda c: c.timestamp, reverse=True)

    def add(self, area_id: str, username: str, message: str) -> Comment:
        if area_id not in AREA_IDS:
            raise NotFoundError(f"Area not found: {area_id}")
        if not username or not username.strip():
            raise ValidationError("Comment author is required")
        if not message or not message.strip():
            raise ValidationError("Comment message is required")

        key = allocate_key(self.store, comment_prefix(area_id), self.clock)
        comment = Comment(id=key, username=username, message=message, timestamp=timestamp_from_key(key))
        self.store.set(key, comment.to_store())
        logger.info(f"💬 {username} commented on {area_id}")
        return comment
