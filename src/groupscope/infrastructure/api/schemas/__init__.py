"""API Schemas for request/response validation."""

from groupscope.infrastructure.api.schemas.group_schemas import (
    GroupCreate,
    GroupResponse,
    GroupStatsResponse,
    GroupTreeNode,
    GroupUpdate,
    ManageableGroupResponse,
    UserGroupUpdate,
)
from groupscope.infrastructure.api.schemas.record_schemas import (
    ActivityCreate,
    ActivityListResponse,
    ActivityResponse,
    CustomerCreate,
    CustomerListResponse,
    CustomerResponse,
)
from groupscope.infrastructure.api.schemas.user_schemas import (
    PermissionResponse,
    UserCreateRequest,
    UserListResponse,
    UserResponse,
    UserUpdateRequest,
)

__all__ = [
    "ActivityCreate",
    "ActivityListResponse",
    "ActivityResponse",
    "CustomerCreate",
    "CustomerListResponse",
    "CustomerResponse",
    "GroupCreate",
    "GroupResponse",
    "GroupStatsResponse",
    "GroupTreeNode",
    "GroupUpdate",
    "ManageableGroupResponse",
    "PermissionResponse",
    "UserCreateRequest",
    "UserGroupUpdate",
    "UserListResponse",
    "UserResponse",
    "UserUpdateRequest",
]
