"""
AREABOARD - Dependency Resolver
===============================
Cross-area dependency lookups. A dependency is a plain sub-point id looked up
in a freshly scanned universe on every call; nothing is cached.
"""

from typing import Dict, Iterable, List, Optional

from .schema import SubPoint, SubPointState, SubPointStatus, area_name


def _index(universe: Iterable[SubPoint]) -> Dict[str, SubPoint]:
    return {sp.id: sp for sp in universe}


def is_satisfied(subpoint: SubPoint, universe: Iterable[SubPoint]) -> bool:
    """
    True when the sub-point has no dependency or its dependency exists and
    is completed. A dangling reference is unsatisfied.
    """
    if not subpoint.depends_on:
        return True
    dependency = _index(universe).get(subpoint.depends_on)
    return dependency is not None and dependency.completed


def would_create_cycle(
    candidate_id: str,
    proposed_depends_on: Optional[str],
    universe: Iterable[SubPoint],
) -> bool:
    """
    Walk dependsOn links starting at the proposed target. Reaching the
    candidate means a cycle. The walk is bounded to len(universe) hops and
    running out of hops also counts as a cycle, so malformed stored data
    cannot hang the check.
    """
    if not proposed_depends_on:
        return False
    if proposed_depends_on == candidate_id:
        return True

    index = _index(universe)
    current = proposed_depends_on
    hops = 0
    while True:
        if current == candidate_id:
            return True
        node = index.get(current)
        if node is None or not node.depends_on:
            return False
        current = node.depends_on
        hops += 1
        if hops > len(index):
            return True


def state_of(subpoint: SubPoint, universe: Iterable[SubPoint]) -> SubPointState:
    if subpoint.completed:
        return SubPointState.COMPLETE
    if not is_satisfied(subpoint, universe):
        return SubPointState.BLOCKED
    return SubPointState.INCOMPLETE


def describe(subpoints: Iterable[SubPoint], universe: Iterable[SubPoint]) -> List[SubPointStatus]:
    """Live status rows, with dependency labels resolved across areas"""
    universe = list(universe)
    index = _index(universe)
    rows = []
    for sp in subpoints:
        dependency = index.get(sp.depends_on) if sp.depends_on else None
        rows.append(SubPointStatus(
            subpoint=sp,
            state=state_of(sp, universe),
            dependency_title=dependency.title if dependency else None,
            dependency_area=area_name(dependency.area_id) if dependency else None,
            dangling=bool(sp.depends_on) and dependency is None,
        ))
    return rows
