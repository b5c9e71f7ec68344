"""Pytest configuration for all tests."""

from datetime import datetime, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from groupscope.domain.entities.group import Group
from groupscope.infrastructure.persistence.database import Base
from groupscope.infrastructure.persistence.models import (
    GroupModel,
    UserGroupModel,
    UserModel,
)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def example_groups() -> list[Group]:
    """Groups 1 -> {2, 3}, 2 -> 4."""
    return [
        Group(id="1", name="Head Office"),
        Group(id="2", name="Sales", parent_id="1"),
        Group(id="3", name="Support", parent_id="1"),
        Group(id="4", name="Sales East", parent_id="2"),
    ]


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def org(db_session: AsyncSession) -> None:
    """Seed the example hierarchy with one user per role.

    Groups: 1 -> {2, 3}, 2 -> 4.

    Users:
        super: super admin, member of 1
        admin2: group admin of 2
        admin3: group admin of 3
        member2: regular user in 2
        member4: regular user in 4
        member3: regular user in 3
        loner: active user with no group
    """
    db_session.add_all(
        [
            GroupModel(id="1", name="Head Office"),
            GroupModel(id="2", name="Sales", parent_id="1"),
            GroupModel(id="3", name="Support", parent_id="1"),
            GroupModel(id="4", name="Sales East", parent_id="2"),
        ]
    )

    users = {
        "super": ("1", True, False),
        "admin2": ("2", False, True),
        "admin3": ("3", False, True),
        "member2": ("2", False, False),
        "member4": ("4", False, False),
        "member3": ("3", False, False),
        "loner": (None, False, False),
    }
    for index, (user_id, (group_id, is_super_admin, is_group_admin)) in enumerate(users.items()):
        db_session.add(
            UserModel(
                id=user_id,
                email=f"{user_id}@example.com",
                name=user_id.title(),
                is_super_admin=is_super_admin,
                is_group_admin=is_group_admin,
            )
        )
        if group_id is not None:
            db_session.add(
                UserGroupModel(
                    user_id=user_id,
                    group_id=group_id,
                    created_at=BASE_TIME + timedelta(minutes=index),
                    joined_at=BASE_TIME + timedelta(minutes=index),
                )
            )

    await db_session.commit()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from groupscope.infrastructure.api.app import app
    from groupscope.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
