"""Repositories for group-scoped records (customers and activities).

Listing takes a GroupAccessFilter, so a caller has to state the visibility
rule it is listing under. None lists every record.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from groupscope.domain.services.query_filter import GroupAccessFilter
from groupscope.infrastructure.persistence.models import ActivityModel, CustomerModel

RecordT = TypeVar("RecordT", CustomerModel, ActivityModel)


class GroupScopedRepository(Generic[RecordT]):
    """Shared create/list operations for a model with a nullable group_id."""

    model: type[RecordT]
    search_columns: tuple[str, ...] = ()
    order_column: str = "created_at"

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, record: RecordT) -> RecordT:
        self.session.add(record)
        await self.session.flush()
        return record

    async def get_by_id(self, record_id: str) -> RecordT | None:
        result = await self.session.execute(select(self.model).where(self.model.id == record_id))
        return result.scalar_one_or_none()

    async def list_accessible(
        self,
        access: GroupAccessFilter | None,
        search: str | None = None,
        limit: int = 50,
        offset: int = 0,
        **filters: Any,
    ) -> tuple[list[RecordT], int]:
        """List records visible through ``access``.

        Args:
            access: Group access predicate for the acting user, or None
                for an unrestricted listing.
            search: Optional case-insensitive substring matched against
                the repository's search columns.
            limit: Page size.
            offset: Page offset.
            **filters: Extra equality filters on model columns; None values
                are ignored.

        Returns:
            The requested page and the total number of visible matches.
        """
        conditions = []
        if access is not None:
            conditions.append(access.to_sqlalchemy(self.model.group_id))
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    *(
                        func.lower(getattr(self.model, column)).like(pattern)
                        for column in self.search_columns
                    )
                )
            )
        for column, value in filters.items():
            if value is not None:
                conditions.append(getattr(self.model, column) == value)

        total = (
            await self.session.execute(
                select(func.count()).select_from(self.model).where(*conditions)
            )
        ).scalar_one()
        result = await self.session.execute(
            select(self.model)
            .where(*conditions)
            .order_by(getattr(self.model, self.order_column).desc(), self.model.id)
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total


class CustomerRepository(GroupScopedRepository[CustomerModel]):
    """Repository for customers."""

    model = CustomerModel
    search_columns = ("name", "email", "company")


class ActivityRepository(GroupScopedRepository[ActivityModel]):
    """Repository for activities."""

    model = ActivityModel
    search_columns = ("title", "description")
