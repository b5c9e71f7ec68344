"""Permission decisions for hierarchical group management.

- Super admins can manage users in any group.
- Group admins can manage users only inside their accessible groups.
- Regular users cannot manage other users.
- Nobody can edit themselves through these checks.

The ``can_*`` functions are pure: they never raise and never touch the
store. The ``validate_*`` wrappers raise PermissionDeniedError when the
matching check fails, for callers that prefer exceptions.
"""

from collections.abc import Iterable, Mapping

from groupscope.core.logging import get_logger
from groupscope.domain.entities.group import Group
from groupscope.domain.entities.permission import (
    GroupPermission,
    TargetUserSummary,
    UserPermission,
)
from groupscope.domain.exceptions import PermissionDeniedError

logger = get_logger(__name__)


def can_manage_group_users(actor: UserPermission, target_group_id: str) -> bool:
    """Check if the actor can manage users in a specific group."""
    if actor.is_super_admin:
        return True
    if actor.is_group_admin:
        return target_group_id in actor.accessible_group_ids
    return False


def can_create_user_in_group(actor: UserPermission, target_group_id: str) -> bool:
    """Creating a user is management-equivalent."""
    return can_manage_group_users(actor, target_group_id)


def can_manage_group(actor: UserPermission, group_id: str) -> bool:
    """Check if the actor can edit, deactivate or add sub-groups to a group."""
    return can_manage_group_users(actor, group_id)


def can_create_root_group(actor: UserPermission) -> bool:
    return actor.is_super_admin


def can_edit_user(actor: UserPermission, target: TargetUserSummary) -> bool:
    """Check if the actor can edit another user.

    Rules, first match wins:

    1. Nobody edits themselves.
    2. Super admins edit anyone, other admins included.
    3. Only super admins edit super admins.
    4. Group admins edit users whose primary group is in their scope.
    5. Otherwise deny.
    """
    if actor.user_id == target.id:
        return False
    if actor.is_super_admin:
        return True
    if target.is_super_admin:
        return False
    if actor.is_group_admin and target.primary_group_id is not None:
        return target.primary_group_id in actor.accessible_group_ids
    return False


def can_change_user_group(
    actor: UserPermission, target: TargetUserSummary, new_group_id: str
) -> bool:
    """Check if the actor can move ``target`` into ``new_group_id``.

    Both the edit gate and the destination gate must pass.
    """
    if not can_edit_user(actor, target):
        return False
    if actor.is_super_admin:
        return True
    return new_group_id in actor.accessible_group_ids


def can_manage_membership(
    actor: UserPermission, target: TargetUserSummary, group_id: str
) -> bool:
    """Check if the actor can add ``target`` to, or remove them from, ``group_id``.

    The actor must manage users in the group and must either be able to edit
    the target or be claiming a user who belongs to no group yet.
    """
    if not can_manage_group_users(actor, group_id):
        return False
    if can_edit_user(actor, target):
        return True
    return (
        target.primary_group_id is None
        and not target.is_super_admin
        and target.id != actor.user_id
    )


def get_manageable_groups(
    actor: UserPermission,
    groups: Iterable[Group],
    user_counts: Mapping[str, int] | None = None,
    customer_counts: Mapping[str, int] | None = None,
) -> list[GroupPermission]:
    """Return the groups the actor can manage, in input order.

    Args:
        actor: The acting user.
        groups: Candidate groups, typically all active groups.
        user_counts: Optional active member count per group ID.
        customer_counts: Optional customer count per group ID.
    """
    user_counts = user_counts or {}
    customer_counts = customer_counts or {}
    return [
        GroupPermission(
            group_id=group.id,
            group_name=group.name,
            is_root_group=group.parent_id is None,
            can_manage=True,
            user_count=user_counts.get(group.id, 0),
            customer_count=customer_counts.get(group.id, 0),
        )
        for group in groups
        if can_manage_group_users(actor, group.id)
    ]


def _deny(reason: str, actor: UserPermission, **context: str | None) -> PermissionDeniedError:
    logger.info("Permission denied", actor_id=actor.user_id, reason=reason, **context)
    return PermissionDeniedError(reason)


def validate_user_creation(actor: UserPermission, target_group_id: str) -> None:
    """Raise PermissionDeniedError unless the actor can create users in the group."""
    if not can_create_user_in_group(actor, target_group_id):
        raise _deny(
            "You do not have permission to create users in this group. "
            "You can only create users in groups you manage.",
            actor,
            group_id=target_group_id,
        )


def validate_user_edit(actor: UserPermission, target: TargetUserSummary) -> None:
    """Raise PermissionDeniedError unless the actor can edit the target user."""
    if not can_edit_user(actor, target):
        raise _deny(
            "You do not have permission to edit this user.",
            actor,
            target_user_id=target.id,
        )


def validate_user_group_assignment(
    actor: UserPermission, target: TargetUserSummary, new_group_id: str
) -> None:
    """Raise PermissionDeniedError unless the actor can move the target user."""
    if not can_change_user_group(actor, target, new_group_id):
        raise _deny(
            "You do not have permission to assign this user to the selected group. "
            "You can only assign users to groups you manage.",
            actor,
            target_user_id=target.id,
            group_id=new_group_id,
        )


def validate_membership_change(
    actor: UserPermission, target: TargetUserSummary, group_id: str
) -> None:
    """Raise PermissionDeniedError unless the actor can change the membership."""
    if not can_manage_membership(actor, target, group_id):
        raise _deny(
            "You do not have permission to manage users in this group.",
            actor,
            target_user_id=target.id,
            group_id=group_id,
        )


def validate_group_management(actor: UserPermission, group_id: str | None) -> None:
    """Raise PermissionDeniedError unless the actor can manage the group.

    ``group_id=None`` stands for the top of the hierarchy, where only super
    admins may create groups.
    """
    if group_id is None:
        if not can_create_root_group(actor):
            raise _deny("Only super admins can manage root groups.", actor)
        return
    if not can_manage_group(actor, group_id):
        raise _deny(
            "You do not have permission to manage this group.",
            actor,
            group_id=group_id,
        )
