"""Application services for GroupScope."""

from groupscope.application.services.access_context_service import (
    AccessContextService,
    GroupSnapshot,
)
from groupscope.application.services.group_service import UNSET, GroupService
from groupscope.application.services.record_service import ActivityService, CustomerService
from groupscope.application.services.user_service import UserService

__all__ = [
    "AccessContextService",
    "ActivityService",
    "CustomerService",
    "GroupService",
    "GroupSnapshot",
    "UNSET",
    "UserService",
]
