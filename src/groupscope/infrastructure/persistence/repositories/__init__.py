"""Persistence repositories for database operations."""

from groupscope.infrastructure.persistence.repositories.group_repository import (
    GroupRepository,
    to_group_entity,
)
from groupscope.infrastructure.persistence.repositories.record_repository import (
    ActivityRepository,
    CustomerRepository,
    GroupScopedRepository,
)
from groupscope.infrastructure.persistence.repositories.user_repository import (
    UserRepository,
    to_membership_entity,
)

__all__ = [
    "ActivityRepository",
    "CustomerRepository",
    "GroupRepository",
    "GroupScopedRepository",
    "UserRepository",
    "to_group_entity",
    "to_membership_entity",
]
