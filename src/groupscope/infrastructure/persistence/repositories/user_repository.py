"""Repository for user and membership database operations."""

from collections.abc import Collection

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from groupscope.domain.entities.group import UserGroupMembership
from groupscope.infrastructure.persistence.database import utcnow
from groupscope.infrastructure.persistence.models import UserGroupModel, UserModel


def to_membership_entity(model: UserGroupModel) -> UserGroupMembership:
    """Convert a UserGroupModel row into the domain membership."""
    return UserGroupMembership(
        user_id=model.user_id,
        group_id=model.group_id,
        is_active=model.is_active,
        joined_at=model.joined_at,
    )


class UserRepository:
    """Repository for users and their group memberships."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Create a new user."""
        self.session.add(user)
        await self.session.flush()
        return user

    async def get_by_id(self, user_id: str) -> UserModel | None:
        """Get a user by ID.

        Args:
            user_id: User ID.

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        result = await self.session.execute(
            select(func.count()).select_from(UserModel).where(UserModel.email == email)
        )
        return result.scalar_one() > 0

    async def list_by_ids(
        self,
        user_ids: Collection[str] | None,
        active_only: bool = True,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[UserModel], int]:
        """List users among ``user_ids`` ordered by email.

        Args:
            user_ids: Candidate user IDs, or None for every user.
            active_only: Skip deactivated users.
            limit: Page size.
            offset: Page offset.

        Returns:
            The requested page of users and the total number of matches.
        """
        if user_ids is not None and not user_ids:
            return [], 0

        conditions = []
        if user_ids is not None:
            conditions.append(UserModel.id.in_(list(user_ids)))
        if active_only:
            conditions.append(UserModel.is_active.is_(True))

        total = (
            await self.session.execute(select(func.count()).select_from(UserModel).where(*conditions))
        ).scalar_one()
        result = await self.session.execute(
            select(UserModel).where(*conditions).order_by(UserModel.email).offset(offset).limit(limit)
        )
        return list(result.scalars().all()), total

    async def update(self, user: UserModel) -> UserModel:
        """Flush changes made to a user."""
        if user not in self.session:
            self.session.add(user)
        await self.session.flush()
        return user

    async def get_memberships(self, user_id: str, active_only: bool = True) -> list[UserGroupModel]:
        """Get a user's memberships, earliest joined first."""
        query = select(UserGroupModel).where(UserGroupModel.user_id == user_id)
        if active_only:
            query = query.where(UserGroupModel.is_active.is_(True))
        result = await self.session.execute(
            query.order_by(UserGroupModel.joined_at, UserGroupModel.group_id)
        )
        return list(result.scalars().all())

    async def list_active_memberships(self) -> list[UserGroupModel]:
        """Get every active membership of every active user."""
        result = await self.session.execute(
            select(UserGroupModel)
            .join(UserModel, UserModel.id == UserGroupModel.user_id)
            .where(UserGroupModel.is_active.is_(True) & UserModel.is_active.is_(True))
            .order_by(UserGroupModel.joined_at, UserGroupModel.id)
        )
        return list(result.scalars().all())

    async def get_membership(self, user_id: str, group_id: str) -> UserGroupModel | None:
        result = await self.session.execute(
            select(UserGroupModel).where(
                (UserGroupModel.user_id == user_id) & (UserGroupModel.group_id == group_id)
            )
        )
        return result.scalar_one_or_none()

    async def add_membership(self, user_id: str, group_id: str) -> UserGroupModel:
        """Add a user to a group, reactivating a previous membership if one exists.

        A reactivated membership counts as joined now, so it never takes the
        primary slot from a membership that stayed active.

        Args:
            user_id: User ID.
            group_id: Group ID.

        Returns:
            The active membership.
        """
        membership = await self.get_membership(user_id, group_id)
        if membership is None:
            membership = UserGroupModel(user_id=user_id, group_id=group_id, is_active=True)
            self.session.add(membership)
        elif not membership.is_active:
            membership.is_active = True
            membership.joined_at = utcnow()
        await self.session.flush()
        return membership

    async def deactivate_membership(self, user_id: str, group_id: str) -> bool:
        """Soft-remove a user from a group.

        Returns:
            True if an active membership was deactivated.
        """
        membership = await self.get_membership(user_id, group_id)
        if membership is None or not membership.is_active:
            return False
        membership.is_active = False
        await self.session.flush()
        return True

    async def deactivate_other_memberships(self, user_id: str, keep_group_id: str) -> list[str]:
        """Soft-remove a user from every group except ``keep_group_id``.

        Returns:
            IDs of the groups the user was removed from.
        """
        removed = []
        for membership in await self.get_memberships(user_id, active_only=True):
            if membership.group_id != keep_group_id:
                membership.is_active = False
                removed.append(membership.group_id)
        if removed:
            await self.session.flush()
        return removed
