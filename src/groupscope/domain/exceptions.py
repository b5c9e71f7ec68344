"""Exceptions raised by the access-control domain.

PermissionDeniedError is the only error the pure decision functions produce,
and only through their validate_* wrappers. The remaining errors belong to
the application services that load and mutate groups and users.
"""


class PermissionDeniedError(PermissionError):
    """Raised when an actor is not allowed to perform an action.

    Always a deliberate denial, never a transient condition.

    Attributes:
        reason: Human-readable explanation shown to the caller.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class GroupNotFoundError(LookupError):
    """Raised when a referenced group does not exist or is inactive."""

    def __init__(self, group_id: str) -> None:
        super().__init__(f"Group '{group_id}' not found")
        self.group_id = group_id


class UserNotFoundError(LookupError):
    """Raised when a referenced user does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User '{user_id}' not found")
        self.user_id = user_id


class GroupHierarchyError(ValueError):
    """Raised when a change would break the group hierarchy.

    Covers reparenting a group under itself or one of its descendants and
    deleting a group that still has active children.
    """


class UserAlreadyExistsError(ValueError):
    """Raised when creating a user whose email is already registered."""

    def __init__(self, email: str) -> None:
        super().__init__(f"A user with email '{email}' already exists")
        self.email = email
