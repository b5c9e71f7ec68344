"""Permission entities for authorization decisions.

UserPermission and TargetUserSummary are request-scoped snapshots built from
a user's flags and their position in the group hierarchy. They are never
persisted.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class UserPermission:
    """The acting user's authorization context.

    Attributes:
        user_id: ID of the acting user.
        is_super_admin: Unrestricted management rights.
        is_group_admin: Management rights limited to accessible_group_ids.
        primary_group_id: The anchor group used for scope resolution.
        accessible_group_ids: The anchor group plus all of its descendants.
    """

    user_id: str
    is_super_admin: bool = False
    is_group_admin: bool = False
    primary_group_id: str | None = None
    accessible_group_ids: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("User ID is required")
        if not isinstance(self.accessible_group_ids, frozenset):
            object.__setattr__(
                self, "accessible_group_ids", frozenset(self.accessible_group_ids)
            )

    def can_access(self, group_id: str | None) -> bool:
        """Whether a resource tagged with ``group_id`` is visible to this actor.

        Untagged resources are visible to everyone.
        """
        return group_id is None or group_id in self.accessible_group_ids


@dataclass(frozen=True)
class TargetUserSummary:
    """The subset of a target user's data that permission checks consult."""

    id: str
    is_super_admin: bool = False
    is_group_admin: bool = False
    primary_group_id: str | None = None


@dataclass(frozen=True)
class GroupPermission:
    """A group annotated with what the actor may do in it."""

    group_id: str
    group_name: str
    is_root_group: bool
    can_manage: bool
    user_count: int = 0
    customer_count: int = 0
