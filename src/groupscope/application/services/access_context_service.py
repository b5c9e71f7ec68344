"""Loads the data an authorization decision needs from the store.

Every decision in a request is made against one GroupSnapshot: the active
groups and the forest built from them are read once, and the acting user's
permission is resolved against that same forest.
"""

from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from groupscope.core.config import get_settings
from groupscope.core.logging import get_logger
from groupscope.domain.entities.group import Group, GroupNode
from groupscope.domain.entities.permission import TargetUserSummary, UserPermission
from groupscope.domain.exceptions import UserNotFoundError
from groupscope.domain.services.access_scope import (
    ScopeMode,
    create_user_permission,
    resolve_primary_group_id,
)
from groupscope.domain.services.group_tree import build_hierarchy
from groupscope.infrastructure.persistence.models import UserModel
from groupscope.infrastructure.persistence.repositories import (
    GroupRepository,
    UserRepository,
    to_group_entity,
    to_membership_entity,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class GroupSnapshot:
    """Active groups and their forest, read together."""

    groups: tuple[Group, ...]
    forest: list[GroupNode] = field(compare=False)

    @classmethod
    def from_groups(cls, groups: list[Group]) -> "GroupSnapshot":
        return cls(groups=tuple(groups), forest=build_hierarchy(groups))

    @property
    def group_ids(self) -> frozenset[str]:
        return frozenset(group.id for group in self.groups)

    def get(self, group_id: str) -> Group | None:
        for group in self.groups:
            if group.id == group_id:
                return group
        return None


class AccessContextService:
    """Builds snapshots and permission contexts from the database."""

    def __init__(self, session: AsyncSession, mode: ScopeMode | None = None) -> None:
        """Initialize the service.

        Args:
            session: SQLAlchemy async session.
            mode: Membership scope mode; defaults to the configured one.
        """
        self.session = session
        self.mode: ScopeMode = mode or get_settings().membership_scope_mode
        self.group_repo = GroupRepository(session)
        self.user_repo = UserRepository(session)

    async def load_snapshot(self) -> GroupSnapshot:
        """Read all active groups and build their forest."""
        models = await self.group_repo.list_all(active_only=True)
        return GroupSnapshot.from_groups([to_group_entity(m) for m in models])

    async def get_user_permission(self, user_id: str, snapshot: GroupSnapshot) -> UserPermission:
        """Resolve the permission context of an active user.

        Raises:
            UserNotFoundError: If the user does not exist or is deactivated.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise UserNotFoundError(user_id)

        memberships = await self.user_repo.get_memberships(user_id, active_only=True)
        permission = create_user_permission(
            user_id=user.id,
            is_super_admin=user.is_super_admin,
            is_group_admin=user.is_group_admin,
            memberships=[to_membership_entity(m) for m in memberships],
            forest=snapshot.forest,
            mode=self.mode,
        )
        logger.debug(
            "Resolved user permission",
            user_id=user_id,
            primary_group_id=permission.primary_group_id,
            accessible_groups=len(permission.accessible_group_ids),
        )
        return permission

    async def get_target(self, user_id: str) -> tuple[UserModel, TargetUserSummary]:
        """Load a user together with the summary the permission checks use.

        Raises:
            UserNotFoundError: If the user does not exist.
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        memberships = await self.user_repo.get_memberships(user_id, active_only=True)
        summary = TargetUserSummary(
            id=user.id,
            is_super_admin=user.is_super_admin,
            is_group_admin=user.is_group_admin,
            primary_group_id=resolve_primary_group_id(
                [to_membership_entity(m) for m in memberships]
            ),
        )
        return user, summary
