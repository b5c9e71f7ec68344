"""Routers for group-scoped CRM records."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from groupscope.application.services import ActivityService, CustomerService
from groupscope.infrastructure.api.dependencies import Context, DBSession
from groupscope.infrastructure.api.schemas.record_schemas import (
    ActivityCreate,
    ActivityListResponse,
    ActivityResponse,
    CustomerCreate,
    CustomerListResponse,
    CustomerResponse,
)
from groupscope.infrastructure.persistence.models import ActivityModel, CustomerModel

customers_router = APIRouter(tags=["Customers"])
activities_router = APIRouter(tags=["Activities"])


def get_customer_service(context: Context, session: DBSession) -> CustomerService:
    return CustomerService(session, context.actor, context.snapshot)


def get_activity_service(context: Context, session: DBSession) -> ActivityService:
    return ActivityService(session, context.actor, context.snapshot)


CustomerSvc = Annotated[CustomerService, Depends(get_customer_service)]
ActivitySvc = Annotated[ActivityService, Depends(get_activity_service)]


@customers_router.get("", response_model=CustomerListResponse, summary="List customers")
async def list_customers(
    customer_service: CustomerSvc,
    search: str | None = None,
    status_filter: Annotated[str | None, Query(alias="status")] = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> CustomerListResponse:
    """List customers that are ungrouped or in one of the actor's groups."""
    items, total = await customer_service.list_customers(
        search=search, status=status_filter, limit=limit, offset=skip
    )
    return CustomerListResponse(
        items=[CustomerResponse.model_validate(item) for item in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@customers_router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a customer",
)
async def create_customer(
    data: CustomerCreate,
    customer_service: CustomerSvc,
    session: DBSession,
) -> CustomerModel:
    customer = await customer_service.create_customer(
        name=data.name,
        email=data.email,
        company=data.company,
        status=data.status,
        group_id=data.group_id,
    )
    await session.commit()
    return customer


@activities_router.get("", response_model=ActivityListResponse, summary="List activities")
async def list_activities(
    activity_service: ActivitySvc,
    search: str | None = None,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
) -> ActivityListResponse:
    items, total = await activity_service.list_activities(search=search, limit=limit, offset=skip)
    return ActivityListResponse(
        items=[ActivityResponse.model_validate(item) for item in items],
        total=total,
        skip=skip,
        limit=limit,
    )


@activities_router.post(
    "",
    response_model=ActivityResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Log an activity",
)
async def create_activity(
    data: ActivityCreate,
    activity_service: ActivitySvc,
    session: DBSession,
) -> ActivityModel:
    """Record an activity authored by the acting user."""
    activity = await activity_service.create_activity(
        title=data.title, description=data.description, group_id=data.group_id
    )
    await session.commit()
    return activity
