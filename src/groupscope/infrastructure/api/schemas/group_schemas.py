"""Pydantic schemas for Group operations."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from groupscope.domain.entities.group import GroupNode


class GroupBase(BaseModel):
    """Base schema for Group data."""

    name: str = Field(..., min_length=1, max_length=100, description="Group name")
    description: str | None = Field(None, max_length=500, description="Group description")


class GroupCreate(GroupBase):
    """Schema for creating a group."""

    parent_id: str | None = Field(
        None, description="Parent group ID; omit to create a root group (super admin only)"
    )


class GroupUpdate(BaseModel):
    """Schema for updating a group.

    Only fields present in the request body are applied, so an explicit
    ``"parent_id": null`` moves the group to the root level.
    """

    name: str | None = Field(None, min_length=1, max_length=100, description="Group name")
    description: str | None = Field(None, max_length=500, description="Group description")
    parent_id: str | None = Field(None, description="New parent group ID")


class GroupResponse(GroupBase):
    """Schema for group response."""

    id: str = Field(..., description="Group ID")
    parent_id: str | None = Field(None, description="Parent group ID")
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GroupTreeNode(BaseModel):
    """A group and its visible sub-groups."""

    id: str
    name: str
    description: str | None = None
    parent_id: str | None = None
    children: list["GroupTreeNode"] = Field(default_factory=list)

    @classmethod
    def from_node(cls, node: GroupNode) -> "GroupTreeNode":
        return cls(
            id=node.id,
            name=node.name,
            description=node.group.description,
            parent_id=node.parent_id,
            children=[cls.from_node(child) for child in node.children],
        )


class ManageableGroupResponse(BaseModel):
    """A group the acting user can manage."""

    group_id: str
    group_name: str
    is_root_group: bool
    can_manage: bool
    user_count: int = 0
    customer_count: int = 0

    model_config = ConfigDict(from_attributes=True)


class GroupStatsResponse(BaseModel):
    """Shape of the visible hierarchy."""

    total_groups: int
    root_groups: int
    max_depth: int
    total_users: int = 0
    total_customers: int = 0

    model_config = ConfigDict(from_attributes=True)


class UserGroupUpdate(BaseModel):
    """Schema for adding a user to a group."""

    user_id: str = Field(..., description="User ID to add")
