"""Access scope resolution.

A group's scope is the group itself plus every group beneath it, never
anything above or beside it. A user's scope is anchored on their group
membership and turned into a UserPermission for the permission checks.
"""

from collections.abc import Iterable
from typing import Literal

from groupscope.domain.entities.group import GroupNode, UserGroupMembership
from groupscope.domain.entities.permission import UserPermission
from groupscope.domain.services.group_tree import get_descendant_ids

ScopeMode = Literal["primary", "union"]


def get_accessible_group_ids(anchor_group_id: str, forest: list[GroupNode]) -> frozenset[str]:
    """Return ``{anchor} | descendants(anchor)``.

    An anchor missing from the forest still yields ``{anchor}``: the user
    keeps visibility of their own nominal group and gains nothing else.
    """
    return frozenset([anchor_group_id, *get_descendant_ids(anchor_group_id, forest)])


def get_accessible_group_ids_for_anchors(
    anchor_group_ids: Iterable[str], forest: list[GroupNode]
) -> frozenset[str]:
    """Union of the scopes of several anchor groups."""
    scope: set[str] = set()
    for anchor_group_id in anchor_group_ids:
        scope |= get_accessible_group_ids(anchor_group_id, forest)
    return frozenset(scope)


def is_descendant(candidate_id: str, of_group_id: str, forest: list[GroupNode]) -> bool:
    """Whether ``candidate_id`` sits strictly below ``of_group_id``.

    Used to refuse reparenting a group under one of its own descendants.
    """
    return candidate_id in get_descendant_ids(of_group_id, forest)


def has_access_to_group(
    anchor_group_id: str, target_group_id: str, forest: list[GroupNode]
) -> bool:
    return target_group_id in get_accessible_group_ids(anchor_group_id, forest)


def get_users_in_group_hierarchy(
    group_id: str,
    memberships: Iterable[UserGroupMembership],
    forest: list[GroupNode],
) -> list[str]:
    """Return IDs of users with an active membership anywhere in the group's scope.

    IDs are de-duplicated and keep the order in which they are first seen.
    """
    scope = get_accessible_group_ids(group_id, forest)
    user_ids = (m.user_id for m in memberships if m.is_active and m.group_id in scope)
    return list(dict.fromkeys(user_ids))


def _active_sorted(memberships: Iterable[UserGroupMembership]) -> list[UserGroupMembership]:
    return sorted(
        (m for m in memberships if m.is_active),
        key=lambda m: (m.joined_at, m.group_id),
    )


def resolve_primary_group_id(memberships: Iterable[UserGroupMembership]) -> str | None:
    """Pick the user's primary group.

    The primary group is the earliest active membership by ``joined_at``;
    ties are broken by group ID so the choice does not depend on the order
    the store returned the rows in.
    """
    active = _active_sorted(memberships)
    return active[0].group_id if active else None


def create_user_permission(
    user_id: str,
    is_super_admin: bool,
    is_group_admin: bool,
    memberships: Iterable[UserGroupMembership],
    forest: list[GroupNode],
    mode: ScopeMode = "primary",
) -> UserPermission:
    """Build the acting user's permission context from one group snapshot.

    Args:
        user_id: The acting user.
        is_super_admin: Super-admin flag from the user record.
        is_group_admin: Group-admin flag from the user record.
        memberships: The user's memberships; inactive ones are ignored.
        forest: Hierarchy built from the same snapshot as the memberships.
        mode: ``"primary"`` anchors the scope on the primary group only;
            ``"union"`` merges the scopes of all active memberships.

    Returns:
        UserPermission with an empty scope when the user has no active
        membership.
    """
    active = _active_sorted(memberships)
    primary_group_id = active[0].group_id if active else None

    if primary_group_id is None:
        accessible: frozenset[str] = frozenset()
    elif mode == "union":
        accessible = get_accessible_group_ids_for_anchors(
            (m.group_id for m in active), forest
        )
    else:
        accessible = get_accessible_group_ids(primary_group_id, forest)

    return UserPermission(
        user_id=user_id,
        is_super_admin=is_super_admin,
        is_group_admin=is_group_admin,
        primary_group_id=primary_group_id,
        accessible_group_ids=accessible,
    )

