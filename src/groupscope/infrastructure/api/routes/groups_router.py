"""Router for group management."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from groupscope.application.services import UNSET, GroupService
from groupscope.core.logging import get_logger
from groupscope.domain.entities.group import GroupStats
from groupscope.domain.entities.permission import GroupPermission
from groupscope.infrastructure.api.dependencies import Context, DBSession
from groupscope.infrastructure.api.schemas.group_schemas import (
    GroupCreate,
    GroupResponse,
    GroupStatsResponse,
    GroupTreeNode,
    GroupUpdate,
    ManageableGroupResponse,
    UserGroupUpdate,
)
from groupscope.infrastructure.api.routes.users_router import UserSvc, to_user_responses
from groupscope.infrastructure.api.schemas.user_schemas import UserListResponse
from groupscope.infrastructure.persistence.models import GroupModel

router = APIRouter(tags=["Groups"])
logger = get_logger(__name__)


def get_group_service(context: Context, session: DBSession) -> GroupService:
    """Get the group service for the acting user."""
    return GroupService(session, context.actor, context.snapshot)


GroupSvc = Annotated[GroupService, Depends(get_group_service)]


@router.get(
    "/tree",
    response_model=list[GroupTreeNode],
    summary="Get the visible group hierarchy",
)
async def get_group_tree(group_service: GroupSvc) -> list[GroupTreeNode]:
    """Return the groups the actor can see as a forest."""
    return [GroupTreeNode.from_node(node) for node in group_service.get_tree()]


@router.get(
    "",
    response_model=list[ManageableGroupResponse],
    summary="List manageable groups",
)
async def list_groups(group_service: GroupSvc) -> list[GroupPermission]:
    """List the groups the actor can manage, with member and customer counts."""
    return await group_service.list_manageable_groups()


@router.get(
    "/stats",
    response_model=GroupStatsResponse,
    summary="Hierarchy statistics",
)
async def get_group_stats(group_service: GroupSvc) -> GroupStats:
    return await group_service.get_statistics()


@router.post(
    "",
    response_model=GroupResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new group",
)
async def create_group(
    group_data: GroupCreate,
    group_service: GroupSvc,
    session: DBSession,
) -> GroupModel:
    """Create a group under ``parent_id``, or a root group for super admins."""
    group = await group_service.create_group(
        name=group_data.name,
        description=group_data.description,
        parent_id=group_data.parent_id,
    )
    await session.commit()
    return group


@router.patch(
    "/{group_id}",
    response_model=GroupResponse,
    summary="Update a group",
)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    group_service: GroupSvc,
    session: DBSession,
) -> GroupModel:
    """Update a group, optionally moving it under a new parent."""
    provided = group_data.model_fields_set
    group = await group_service.update_group(
        group_id,
        name=group_data.name,
        description=group_data.description if "description" in provided else UNSET,
        parent_id=group_data.parent_id if "parent_id" in provided else UNSET,
    )
    await session.commit()
    return group


@router.delete(
    "/{group_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a group",
)
async def delete_group(group_id: str, group_service: GroupSvc, session: DBSession) -> None:
    """Soft-delete a group that has no active child groups."""
    await group_service.delete_group(group_id)
    await session.commit()


@router.get(
    "/{group_id}/users",
    response_model=UserListResponse,
    summary="List users in a group's hierarchy",
)
async def list_group_users(
    group_id: str,
    group_service: GroupSvc,
    user_service: UserSvc,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> UserListResponse:
    """List active users of the group and all of its sub-groups."""
    users, total = await group_service.list_users_in_hierarchy(group_id, limit=limit, offset=skip)
    return UserListResponse(
        items=await to_user_responses(user_service, users),
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post(
    "/{group_id}/users",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Add a user to a group",
)
async def add_user_to_group(
    group_id: str,
    data: UserGroupUpdate,
    group_service: GroupSvc,
    session: DBSession,
) -> None:
    await group_service.add_user(group_id, data.user_id)
    await session.commit()


@router.delete(
    "/{group_id}/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove a user from a group",
)
async def remove_user_from_group(
    group_id: str,
    user_id: str,
    group_service: GroupSvc,
    session: DBSession,
) -> None:
    await group_service.remove_user(group_id, user_id)
    await session.commit()
