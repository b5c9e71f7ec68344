"""SQLAlchemy model for the user_groups membership table."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from groupscope.infrastructure.persistence.database import Base, utcnow


class UserGroupModel(Base):
    """A user's membership in a group.

    One row per (user, group) pair. Leaving a group clears is_active and
    rejoining sets it again. created_at keeps the first join time while
    joined_at moves to the latest (re)activation; the primary group is
    resolved from joined_at.

    Attributes:
        id: Surrogate primary key.
        user_id: Foreign key to users table.
        group_id: Foreign key to groups table.
        is_active: Whether the membership is in effect.
        created_at: Timestamp when the user first joined the group.
        joined_at: Timestamp when the membership last became active.
    """

    __tablename__ = "user_groups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    group_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )
    joined_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    __table_args__ = (
        UniqueConstraint("user_id", "group_id", name="uq_user_groups_user_group"),
    )

    def __repr__(self) -> str:
        return f"<UserGroup(user_id={self.user_id}, group_id={self.group_id}, is_active={self.is_active})>"
