"""User management on behalf of an acting user.

Updates check the edit permission and, when the group changes, the
destination permission before any field is applied, so a request is never
half-applied.
"""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from groupscope.application.services.access_context_service import (
    AccessContextService,
    GroupSnapshot,
)
from groupscope.core.logging import get_logger
from groupscope.domain.entities.permission import UserPermission
from groupscope.domain.exceptions import (
    GroupNotFoundError,
    PermissionDeniedError,
    UserAlreadyExistsError,
)
from groupscope.domain.services.permission_evaluator import (
    validate_user_creation,
    validate_user_edit,
    validate_user_group_assignment,
)
from groupscope.infrastructure.persistence.models import UserModel
from groupscope.infrastructure.persistence.repositories import UserRepository

logger = get_logger(__name__)


class UserService:
    """Service for user management business logic."""

    def __init__(self, session: AsyncSession, actor: UserPermission, snapshot: GroupSnapshot) -> None:
        """Initialize the user service.

        Args:
            session: SQLAlchemy async session.
            actor: Permission context of the acting user.
            snapshot: Group snapshot the actor's permission was resolved against.
        """
        self.session = session
        self.actor = actor
        self.snapshot = snapshot
        self.user_repo = UserRepository(session)
        self.access = AccessContextService(session)

    def _require_active_group(self, group_id: str) -> None:
        if self.snapshot.get(group_id) is None:
            raise GroupNotFoundError(group_id)

    def _check_role_flags(self, is_super_admin: bool | None, is_group_admin: bool | None) -> None:
        if is_super_admin and not self.actor.is_super_admin:
            raise PermissionDeniedError("Only super admins can grant super admin rights.")
        if is_group_admin and not (self.actor.is_super_admin or self.actor.is_group_admin):
            raise PermissionDeniedError("Only admins can grant group admin rights.")

    async def create_user(
        self,
        email: str,
        group_id: str,
        name: str = "",
        is_group_admin: bool = False,
        is_super_admin: bool = False,
    ) -> UserModel:
        """Create a user as a member of ``group_id``.

        Raises:
            GroupNotFoundError: If the group is missing or inactive.
            PermissionDeniedError: If the actor cannot create users there or
                grants rights they do not hold.
            UserAlreadyExistsError: If the email is taken.
        """
        self._require_active_group(group_id)
        validate_user_creation(self.actor, group_id)
        self._check_role_flags(is_super_admin, is_group_admin)
        if await self.user_repo.email_exists(email):
            raise UserAlreadyExistsError(email)

        user = UserModel(
            id=str(uuid.uuid4()),
            email=email,
            name=name,
            is_super_admin=is_super_admin,
            is_group_admin=is_group_admin,
            is_active=True,
        )
        await self.user_repo.create(user)
        await self.user_repo.add_membership(user.id, group_id)
        logger.info(
            "User created",
            user_id=user.id,
            group_id=group_id,
            actor_id=self.actor.user_id,
        )
        return user

    async def update_user(
        self,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
        is_group_admin: bool | None = None,
        is_super_admin: bool | None = None,
        is_active: bool | None = None,
        group_id: str | None = None,
    ) -> UserModel:
        """Update a user's profile, flags and primary group.

        Moving the user to ``group_id`` replaces all of their active
        memberships with that one group.

        Raises:
            UserNotFoundError: If the user does not exist.
            GroupNotFoundError: If the new group is missing or inactive.
            PermissionDeniedError: If the actor cannot edit the user, cannot
                reach the new group or grants rights they do not hold.
            UserAlreadyExistsError: If the new email is taken.
        """
        user, target = await self.access.get_target(user_id)
        validate_user_edit(self.actor, target)

        change_group = group_id is not None and group_id != target.primary_group_id
        if change_group:
            self._require_active_group(group_id)
            validate_user_group_assignment(self.actor, target, group_id)

        self._check_role_flags(is_super_admin, is_group_admin)
        if email is not None and email != user.email and await self.user_repo.email_exists(email):
            raise UserAlreadyExistsError(email)

        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if is_group_admin is not None:
            user.is_group_admin = is_group_admin
        if is_super_admin is not None:
            user.is_super_admin = is_super_admin
        if is_active is not None:
            user.is_active = is_active
        await self.user_repo.update(user)

        if change_group:
            # The destination becomes the only active membership, and so the primary one
            await self.user_repo.add_membership(user_id, group_id)
            removed = await self.user_repo.deactivate_other_memberships(user_id, group_id)
            logger.info(
                "User moved to group",
                user_id=user_id,
                from_group_id=target.primary_group_id,
                to_group_id=group_id,
                left_group_ids=removed,
            )

        logger.info("User updated", user_id=user_id, actor_id=self.actor.user_id)
        return user

    async def deactivate_user(self, user_id: str) -> None:
        """Soft-delete a user."""
        user, target = await self.access.get_target(user_id)
        validate_user_edit(self.actor, target)
        user.is_active = False
        await self.user_repo.update(user)
        logger.info("User deactivated", user_id=user_id, actor_id=self.actor.user_id)

    async def get_primary_group_ids(self, user_ids: list[str]) -> dict[str, str | None]:
        """Primary group of each user, for display."""
        result: dict[str, str | None] = {}
        for user_id in user_ids:
            memberships = await self.user_repo.get_memberships(user_id, active_only=True)
            result[user_id] = memberships[0].group_id if memberships else None
        return result

    async def list_accessible_users(
        self, limit: int = 100, offset: int = 0
    ) -> tuple[list[UserModel], int]:
        """List the users the actor can see.

        Super admins see every active user; everyone else sees the members
        of their accessible groups.
        """
        if self.actor.is_super_admin:
            return await self.user_repo.list_by_ids(None, limit=limit, offset=offset)

        memberships = await self.user_repo.list_active_memberships()
        user_ids = dict.fromkeys(
            m.user_id for m in memberships if m.group_id in self.actor.accessible_group_ids
        )
        return await self.user_repo.list_by_ids(list(user_ids), limit=limit, offset=offset)
