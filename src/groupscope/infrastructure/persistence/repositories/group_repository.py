"""Repository for group database operations."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from groupscope.domain.entities.group import Group
from groupscope.infrastructure.persistence.models import (
    CustomerModel,
    GroupModel,
    UserGroupModel,
    UserModel,
)


def to_group_entity(model: GroupModel) -> Group:
    """Convert a GroupModel row into the domain Group."""
    return Group(
        id=model.id,
        name=model.name,
        description=model.description,
        parent_id=model.parent_id,
        is_active=model.is_active,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )


class GroupRepository:
    """Repository for group database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, group: GroupModel) -> GroupModel:
        """Create a new group.

        Args:
            group: Group model to create.

        Returns:
            Created group model.
        """
        self.session.add(group)
        await self.session.flush()
        return group

    async def get_by_id(self, group_id: str) -> GroupModel | None:
        """Get a group by ID, active or not.

        Args:
            group_id: Group ID.

        Returns:
            Group model if found, None otherwise.
        """
        result = await self.session.execute(
            select(GroupModel).where(GroupModel.id == group_id)
        )
        return result.scalar_one_or_none()

    async def list_all(self, active_only: bool = True) -> list[GroupModel]:
        """List groups ordered by name, then ID.

        The snapshot forest is built in this order, so sibling order follows
        names and a stored parent cycle is broken at its first member by name.

        Args:
            active_only: Skip soft-deleted groups.

        Returns:
            List of group models.
        """
        query = select(GroupModel).order_by(GroupModel.name, GroupModel.id)
        if active_only:
            query = query.where(GroupModel.is_active.is_(True))
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_active_children(self, group_id: str) -> int:
        """Count active groups whose parent is ``group_id``."""
        result = await self.session.execute(
            select(func.count())
            .select_from(GroupModel)
            .where(
                (GroupModel.parent_id == group_id) & (GroupModel.is_active.is_(True))
            )
        )
        return result.scalar_one()

    async def update(self, group: GroupModel) -> GroupModel:
        """Flush changes made to a group.

        Args:
            group: Group model to update.

        Returns:
            Updated group model.
        """
        if group not in self.session:
            self.session.add(group)
        await self.session.flush()
        return group

    async def get_member_counts(self) -> dict[str, int]:
        """Count active members of active users per group."""
        result = await self.session.execute(
            select(UserGroupModel.group_id, func.count(UserGroupModel.id))
            .join(UserModel, UserModel.id == UserGroupModel.user_id)
            .where(UserGroupModel.is_active.is_(True) & UserModel.is_active.is_(True))
            .group_by(UserGroupModel.group_id)
        )
        return {group_id: count for group_id, count in result.all()}

    async def get_customer_counts(self) -> dict[str, int]:
        """Count customers per group, ignoring ungrouped customers."""
        result = await self.session.execute(
            select(CustomerModel.group_id, func.count(CustomerModel.id))
            .where(CustomerModel.group_id.is_not(None))
            .group_by(CustomerModel.group_id)
        )
        return {group_id: count for group_id, count in result.all()}
