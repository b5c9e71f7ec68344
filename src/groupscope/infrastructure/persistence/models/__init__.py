"""SQLAlchemy models for GroupScope tables.

All models inherit from the Base class defined in database.py and are
created on application startup in development mode.
"""

from groupscope.infrastructure.persistence.models.activity import ActivityModel
from groupscope.infrastructure.persistence.models.customer import CustomerModel
from groupscope.infrastructure.persistence.models.group import GroupModel
from groupscope.infrastructure.persistence.models.user import UserModel
from groupscope.infrastructure.persistence.models.user_group import UserGroupModel

__all__ = [
    "ActivityModel",
    "CustomerModel",
    "GroupModel",
    "UserGroupModel",
    "UserModel",
]
