"""
AREABOARD - Error Taxonomy
==========================
Every failure a board operation can report. The ``kind`` string is what
``Result.error_kind`` carries back to the caller.
"""


class AreaBoardError(Exception):
    """Base class for all board failures"""
    kind = "error"


class ValidationError(AreaBoardError):
    """Empty required field or unresolvable reference"""
    kind = "validation"


class CycleError(AreaBoardError):
    """Dependency assignment would create a cycle (self-reference included)"""
    kind = "cycle"


class DependencyUnmetError(AreaBoardError):
    """Completion attempted while the dependency is incomplete or dangling"""
    kind = "dependency_unmet"


class AuthorizationError(AreaBoardError):
    """Non-creator attempted an edit or delete"""
    kind = "authorization"


class AlreadyClaimedError(AreaBoardError):
    """Responsibility for the sub-point is already claimed"""
    kind = "already_claimed"


class NotFoundError(AreaBoardError):
    """Operation on a missing identifier"""
    kind = "not_found"


class StoreError(AreaBoardError):
    """Storage collaborator failure"""
    kind = "store"
