"""Group management on behalf of an acting user.

Each operation checks permissions against the request's snapshot before it
writes anything.
"""

import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from groupscope.application.services.access_context_service import (
    AccessContextService,
    GroupSnapshot,
)
from groupscope.core.logging import get_logger
from groupscope.domain.entities.group import GroupNode, GroupStats
from groupscope.domain.entities.permission import GroupPermission, UserPermission
from groupscope.domain.exceptions import (
    GroupHierarchyError,
    GroupNotFoundError,
    PermissionDeniedError,
)
from groupscope.domain.services.access_scope import (
    get_users_in_group_hierarchy,
    is_descendant,
)
from groupscope.domain.services.group_tree import build_hierarchy, calculate_group_stats
from groupscope.domain.services.permission_evaluator import (
    get_manageable_groups,
    validate_group_management,
    validate_membership_change,
)
from groupscope.infrastructure.persistence.models import GroupModel, UserModel
from groupscope.infrastructure.persistence.repositories import (
    GroupRepository,
    UserRepository,
    to_membership_entity,
)

logger = get_logger(__name__)

UNSET: Any = object()


class GroupService:
    """Service for group business logic."""

    def __init__(self, session: AsyncSession, actor: UserPermission, snapshot: GroupSnapshot) -> None:
        """Initialize the group service.

        Args:
            session: SQLAlchemy async session.
            actor: Permission context of the acting user.
            snapshot: Group snapshot the actor's permission was resolved against.
        """
        self.session = session
        self.actor = actor
        self.snapshot = snapshot
        self.group_repo = GroupRepository(session)
        self.user_repo = UserRepository(session)
        self.access = AccessContextService(session)

    def _visible_group_ids(self) -> frozenset[str]:
        if self.actor.is_super_admin:
            return self.snapshot.group_ids
        return self.actor.accessible_group_ids & self.snapshot.group_ids

    def get_tree(self) -> list[GroupNode]:
        """Return the part of the hierarchy the actor can see.

        Groups whose parent is outside the actor's scope come back as roots.
        """
        visible = self._visible_group_ids()
        return build_hierarchy(g for g in self.snapshot.groups if g.id in visible)

    async def list_manageable_groups(self) -> list[GroupPermission]:
        """List the groups the actor can manage, with member and customer counts."""
        user_counts = await self.group_repo.get_member_counts()
        customer_counts = await self.group_repo.get_customer_counts()
        return get_manageable_groups(
            self.actor, self.snapshot.groups, user_counts, customer_counts
        )

    def _require_active(self, group_id: str) -> None:
        if self.snapshot.get(group_id) is None:
            raise GroupNotFoundError(group_id)

    async def _load(self, group_id: str) -> GroupModel:
        self._require_active(group_id)
        group = await self.group_repo.get_by_id(group_id)
        if group is None or not group.is_active:
            raise GroupNotFoundError(group_id)
        return group

    async def create_group(
        self, name: str, description: str | None = None, parent_id: str | None = None
    ) -> GroupModel:
        """Create a group under ``parent_id`` (or a root group when None).

        Raises:
            GroupNotFoundError: If the parent is missing or inactive.
            PermissionDeniedError: If the actor cannot manage the parent, or
                is creating a root group without being a super admin.
        """
        if parent_id is not None:
            self._require_active(parent_id)
        validate_group_management(self.actor, parent_id)

        group = GroupModel(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            parent_id=parent_id,
            is_active=True,
        )
        await self.group_repo.create(group)
        logger.info(
            "Group created",
            group_id=group.id,
            parent_id=parent_id,
            actor_id=self.actor.user_id,
        )
        return group

    async def update_group(
        self,
        group_id: str,
        name: str | None = None,
        description: str | None = UNSET,
        parent_id: str | None = UNSET,
    ) -> GroupModel:
        """Edit a group, optionally moving it under another parent.

        Every check runs before any field is changed.

        Raises:
            GroupNotFoundError: If the group or the new parent is missing.
            GroupHierarchyError: If the new parent is the group itself or
                one of its descendants.
            PermissionDeniedError: If the actor cannot manage the group or
                the destination.
        """
        group = await self._load(group_id)
        validate_group_management(self.actor, group_id)

        reparent = parent_id is not UNSET and parent_id != group.parent_id
        if reparent:
            if parent_id is not None:
                if parent_id == group_id:
                    raise GroupHierarchyError("A group cannot be its own parent")
                self._require_active(parent_id)
                if is_descendant(parent_id, group_id, self.snapshot.forest):
                    raise GroupHierarchyError(
                        "Cannot set parent to a descendant group (circular reference)"
                    )
            validate_group_management(self.actor, parent_id)

        if name is not None:
            group.name = name
        if description is not UNSET:
            group.description = description
        if reparent:
            group.parent_id = parent_id

        await self.group_repo.update(group)
        logger.info("Group updated", group_id=group_id, actor_id=self.actor.user_id)
        return group

    async def delete_group(self, group_id: str) -> None:
        """Soft-delete a group.

        Raises:
            GroupHierarchyError: If the group still has active child groups.
        """
        group = await self._load(group_id)
        validate_group_management(self.actor, group_id)

        if await self.group_repo.count_active_children(group_id) > 0:
            raise GroupHierarchyError(
                "Cannot delete group with child groups. "
                "Please delete or move child groups first."
            )

        group.is_active = False
        await self.group_repo.update(group)
        logger.info("Group deactivated", group_id=group_id, actor_id=self.actor.user_id)

    async def add_user(self, group_id: str, user_id: str) -> None:
        """Add a user to a group, reactivating an earlier membership."""
        self._require_active(group_id)
        _, target = await self.access.get_target(user_id)
        validate_membership_change(self.actor, target, group_id)
        await self.user_repo.add_membership(user_id, group_id)
        logger.info("User added to group", group_id=group_id, user_id=user_id)

    async def remove_user(self, group_id: str, user_id: str) -> bool:
        """Soft-remove a user from a group.

        Returns:
            True if an active membership was removed.
        """
        self._require_active(group_id)
        _, target = await self.access.get_target(user_id)
        validate_membership_change(self.actor, target, group_id)
        removed = await self.user_repo.deactivate_membership(user_id, group_id)
        if removed:
            logger.info("User removed from group", group_id=group_id, user_id=user_id)
        return removed

    async def list_users_in_hierarchy(
        self, group_id: str, limit: int = 100, offset: int = 0
    ) -> tuple[list[UserModel], int]:
        """List active users anywhere in the group's subtree.

        Raises:
            PermissionDeniedError: If the group is outside the actor's scope.
        """
        self._require_active(group_id)
        if group_id not in self._visible_group_ids():
            raise PermissionDeniedError("You do not have access to this group.")

        memberships = await self.user_repo.list_active_memberships()
        user_ids = get_users_in_group_hierarchy(
            group_id,
            [to_membership_entity(m) for m in memberships],
            self.snapshot.forest,
        )
        return await self.user_repo.list_by_ids(user_ids, limit=limit, offset=offset)

    async def get_statistics(self) -> GroupStats:
        """Shape of the visible hierarchy with user and customer totals."""
        visible = self._visible_group_ids()
        stats = calculate_group_stats(self.get_tree())

        memberships = await self.user_repo.list_active_memberships()
        stats.total_users = len({m.user_id for m in memberships if m.group_id in visible})
        customer_counts = await self.group_repo.get_customer_counts()
        stats.total_customers = sum(
            count for gid, count in customer_counts.items() if gid in visible
        )
        return stats
