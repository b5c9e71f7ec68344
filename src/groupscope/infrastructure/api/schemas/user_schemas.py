"""Pydantic schemas for User operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreateRequest(BaseModel):
    """Request schema for creating a user inside a group."""

    email: EmailStr = Field(..., description="User's email address")
    name: str = Field("", max_length=200, description="Display name")
    group_id: str = Field(..., description="Group the user joins")
    is_group_admin: bool = Field(False, description="Grant group admin rights")
    is_super_admin: bool = Field(False, description="Grant super admin rights")


class UserUpdateRequest(BaseModel):
    """Request schema for updating a user.

    All fields are optional. Only provided fields will be updated. Setting
    ``group_id`` moves the user to another primary group.
    """

    email: EmailStr | None = Field(None, description="User's email address")
    name: str | None = Field(None, max_length=200, description="Display name")
    group_id: str | None = Field(None, description="New primary group")
    is_group_admin: bool | None = None
    is_super_admin: bool | None = None
    is_active: bool | None = Field(None, description="Whether the user is active")


class UserResponse(BaseModel):
    """Response schema for a single user."""

    id: str
    email: str
    name: str
    is_super_admin: bool
    is_group_admin: bool
    is_active: bool
    primary_group_id: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserListResponse(BaseModel):
    """Response schema for a page of users."""

    items: list[UserResponse]
    total: int
    skip: int
    limit: int


class PermissionResponse(BaseModel):
    """The acting user's resolved permission context."""

    user_id: str
    is_super_admin: bool
    is_group_admin: bool
    primary_group_id: str | None
    accessible_group_ids: list[str]
