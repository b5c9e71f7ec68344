"""Visibility-scoped access to customers and activities."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from groupscope.application.services.access_context_service import GroupSnapshot
from groupscope.core.logging import get_logger
from groupscope.domain.entities.permission import UserPermission
from groupscope.domain.exceptions import GroupNotFoundError, PermissionDeniedError
from groupscope.domain.services.query_filter import GroupAccessFilter, access_where_clause
from groupscope.infrastructure.persistence.models import ActivityModel, CustomerModel
from groupscope.infrastructure.persistence.repositories import (
    ActivityRepository,
    CustomerRepository,
)

logger = get_logger(__name__)


class _ScopedRecordService:
    def __init__(self, session: AsyncSession, actor: UserPermission, snapshot: GroupSnapshot) -> None:
        self.session = session
        self.actor = actor
        self.snapshot = snapshot

    @property
    def access(self) -> GroupAccessFilter | None:
        """The actor's visibility filter; None means unrestricted."""
        if self.actor.is_super_admin:
            return None
        return access_where_clause(self.actor.accessible_group_ids)

    def _check_target_group(self, group_id: str | None) -> None:
        """Records may be created ungrouped or in an active group the actor can see."""
        if group_id is None:
            return
        if self.snapshot.get(group_id) is None:
            raise GroupNotFoundError(group_id)
        if not self.actor.is_super_admin and not self.actor.can_access(group_id):
            raise PermissionDeniedError("You do not have access to this group.")


class CustomerService(_ScopedRecordService):
    """Customers visible to the acting user."""

    def __init__(self, session: AsyncSession, actor: UserPermission, snapshot: GroupSnapshot) -> None:
        super().__init__(session, actor, snapshot)
        self.customer_repo = CustomerRepository(session)

    async def list_customers(
        self,
        search: str | None = None,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[CustomerModel], int]:
        return await self.customer_repo.list_accessible(
            self.access, search=search, limit=limit, offset=offset, status=status
        )

    async def create_customer(
        self,
        name: str,
        email: str | None = None,
        company: str | None = None,
        status: str = "lead",
        group_id: str | None = None,
    ) -> CustomerModel:
        self._check_target_group(group_id)
        customer = CustomerModel(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            company=company,
            status=status,
            group_id=group_id,
        )
        await self.customer_repo.create(customer)
        logger.info("Customer created", customer_id=customer.id, group_id=group_id)
        return customer


class ActivityService(_ScopedRecordService):
    """Activities visible to the acting user."""

    def __init__(self, session: AsyncSession, actor: UserPermission, snapshot: GroupSnapshot) -> None:
        super().__init__(session, actor, snapshot)
        self.activity_repo = ActivityRepository(session)

    async def list_activities(
        self, search: str | None = None, limit: int = 50, offset: int = 0
    ) -> tuple[list[ActivityModel], int]:
        return await self.activity_repo.list_accessible(
            self.access, search=search, limit=limit, offset=offset
        )

    async def create_activity(
        self, title: str, description: str | None = None, group_id: str | None = None
    ) -> ActivityModel:
        self._check_target_group(group_id)
        activity = ActivityModel(
            id=str(uuid.uuid4()),
            title=title,
            description=description,
            created_by_id=self.actor.user_id,
            group_id=group_id,
        )
        await self.activity_repo.create(activity)
        logger.info("Activity created", activity_id=activity.id, group_id=group_id)
        return activity
