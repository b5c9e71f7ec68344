"""Pydantic schemas for customers and activities."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

CustomerStatus = Literal["lead", "prospect", "active", "inactive"]


class CustomerCreate(BaseModel):
    """Request schema for creating a customer."""

    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr | None = None
    company: str | None = Field(None, max_length=200)
    status: CustomerStatus = "lead"
    group_id: str | None = Field(None, description="Owning group; omit for a global customer")


class CustomerResponse(BaseModel):
    id: str
    name: str
    email: str | None
    company: str | None
    status: str
    group_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CustomerListResponse(BaseModel):
    items: list[CustomerResponse]
    total: int
    skip: int
    limit: int


class ActivityCreate(BaseModel):
    """Request schema for logging an activity."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    group_id: str | None = Field(None, description="Owning group; omit for a global activity")


class ActivityResponse(BaseModel):
    id: str
    title: str
    description: str | None
    created_by_id: str
    group_id: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ActivityListResponse(BaseModel):
    items: list[ActivityResponse]
    total: int
    skip: int
    limit: int
