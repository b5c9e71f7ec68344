"""Group entities for the organizational hierarchy.

Groups form a forest through their parent_id references. GroupNode is the
in-memory tree form rebuilt from a flat group list for every access-control
computation; it is never persisted.
"""

import weakref
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Group:
    """Group entity: one node of the organizational hierarchy.

    Attributes:
        id: Unique identifier (UUID string).
        name: Group name.
        description: Optional description of the group's purpose.
        parent_id: ID of the parent group, or None for a root group.
        is_active: False once the group has been soft-deleted.
        created_at: Timestamp when the group was created.
        updated_at: Timestamp when the group was last updated.
    """

    id: str
    name: str
    description: str | None = None
    parent_id: str | None = None
    is_active: bool = True
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Validate group data after initialization."""
        if not self.id:
            raise ValueError("Group ID is required")
        if not self.name:
            raise ValueError("Group name is required")

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


@dataclass(eq=False)
class GroupNode:
    """A group placed in the in-memory hierarchy.

    The forest owns its nodes top-down through ``children``. The link back to
    the parent is a weak reference used for lookups only; it resolves to
    None for roots and once the owning forest has been discarded.
    """

    group: Group
    children: list["GroupNode"] = field(default_factory=list)
    _parent_ref: "weakref.ReferenceType[GroupNode] | None" = field(
        default=None, repr=False
    )

    @property
    def id(self) -> str:
        return self.group.id

    @property
    def name(self) -> str:
        return self.group.name

    @property
    def parent_id(self) -> str | None:
        return self.group.parent_id

    @property
    def parent(self) -> "GroupNode | None":
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def is_root(self) -> bool:
        """True when the node sits at the top of the forest.

        A group whose parent_id points at a group missing from the snapshot
        is still a root here, even though ``group.parent_id`` is set.
        """
        return self._parent_ref is None

    def attach(self, child: "GroupNode") -> None:
        """Append ``child`` under this node and point its parent link here."""
        child._parent_ref = weakref.ref(self)
        self.children.append(child)


@dataclass
class UserGroupMembership:
    """A user's membership in a group.

    Memberships are soft-removed by clearing ``is_active``. ``joined_at`` is
    when the membership last became active.
    """

    user_id: str
    group_id: str
    is_active: bool = True
    joined_at: datetime = field(default_factory=_utcnow)


@dataclass
class GroupStats:
    """Shape statistics for a group forest."""

    total_groups: int
    root_groups: int
    max_depth: int
    total_users: int = 0
    total_customers: int = 0
