"""Router for user management and permission introspection."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from groupscope.application.services import GroupService, UserService
from groupscope.core.logging import get_logger
from groupscope.domain.entities.permission import GroupPermission
from groupscope.infrastructure.api.dependencies import Context, DBSession
from groupscope.infrastructure.api.schemas.group_schemas import ManageableGroupResponse
from groupscope.infrastructure.api.schemas.user_schemas import (
    PermissionResponse,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)
from groupscope.infrastructure.persistence.models import UserModel

router = APIRouter(tags=["Users"])
logger = get_logger(__name__)


def get_user_service(context: Context, session: DBSession) -> UserService:
    """Get the user service for the acting user."""
    return UserService(session, context.actor, context.snapshot)


UserSvc = Annotated[UserService, Depends(get_user_service)]


async def to_user_responses(user_service: UserService, users: list[UserModel]) -> list[UserResponse]:
    """Serialize users together with their primary group."""
    primary = await user_service.get_primary_group_ids([user.id for user in users])
    return [
        UserResponse.model_validate(user).model_copy(update={"primary_group_id": primary[user.id]})
        for user in users
    ]


@router.get(
    "/me/permissions",
    response_model=PermissionResponse,
    summary="Get the acting user's permissions",
)
async def get_my_permissions(context: Context) -> PermissionResponse:
    actor = context.actor
    return PermissionResponse(
        user_id=actor.user_id,
        is_super_admin=actor.is_super_admin,
        is_group_admin=actor.is_group_admin,
        primary_group_id=actor.primary_group_id,
        accessible_group_ids=sorted(actor.accessible_group_ids),
    )


@router.get(
    "/manageable-groups",
    response_model=list[ManageableGroupResponse],
    summary="List groups the acting user can manage",
)
async def get_manageable_groups(context: Context, session: DBSession) -> list[GroupPermission]:
    """Groups the acting user may create users in, with member counts."""
    group_service = GroupService(session, context.actor, context.snapshot)
    return await group_service.list_manageable_groups()


@router.get(
    "",
    response_model=UserListResponse,
    summary="List visible users",
)
async def list_users(
    user_service: UserSvc,
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
) -> UserListResponse:
    """List active users in the actor's accessible groups (all users for super admins)."""
    users, total = await user_service.list_accessible_users(limit=limit, offset=skip)
    return UserListResponse(
        items=await to_user_responses(user_service, users),
        total=total,
        skip=skip,
        limit=limit,
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user",
)
async def create_user(
    user_data: UserCreateRequest,
    user_service: UserSvc,
    session: DBSession,
) -> UserResponse:
    user = await user_service.create_user(
        email=user_data.email,
        group_id=user_data.group_id,
        name=user_data.name,
        is_group_admin=user_data.is_group_admin,
        is_super_admin=user_data.is_super_admin,
    )
    await session.commit()
    return (await to_user_responses(user_service, [user]))[0]


@router.patch(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update a user",
)
async def update_user(
    user_id: str,
    user_data: UserUpdateRequest,
    user_service: UserSvc,
    session: DBSession,
) -> UserResponse:
    """Update a user's profile, flags or primary group.

    The edit and, for a group change, the destination are both checked
    before anything is written.
    """
    user = await user_service.update_user(
        user_id,
        name=user_data.name,
        email=user_data.email,
        is_group_admin=user_data.is_group_admin,
        is_super_admin=user_data.is_super_admin,
        is_active=user_data.is_active,
        group_id=user_data.group_id,
    )
    await session.commit()
    return (await to_user_responses(user_service, [user]))[0]


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Deactivate a user",
)
async def delete_user(user_id: str, user_service: UserSvc, session: DBSession) -> None:
    await user_service.deactivate_user(user_id)
    await session.commit()
