"""Domain entities for GroupScope.

Entities are pure Python dataclasses that represent core business concepts.
They have no dependencies on infrastructure or external frameworks.
"""

from groupscope.domain.entities.group import (
    Group,
    GroupNode,
    GroupStats,
    UserGroupMembership,
)
from groupscope.domain.entities.permission import (
    GroupPermission,
    TargetUserSummary,
    UserPermission,
)

__all__ = [
    "Group",
    "GroupNode",
    "GroupPermission",
    "GroupStats",
    "TargetUserSummary",
    "UserGroupMembership",
    "UserPermission",
]
