"""Unit tests for UserService."""

from datetime import datetime

import pytest

from groupscope.application.services import AccessContextService, UserService
from groupscope.domain.exceptions import (
    GroupNotFoundError,
    PermissionDeniedError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from groupscope.infrastructure.persistence.models import UserGroupModel
from groupscope.infrastructure.persistence.repositories import UserRepository


async def service_for(session, user_id: str) -> UserService:
    access = AccessContextService(session, mode="primary")
    snapshot = await access.load_snapshot()
    actor = await access.get_user_permission(user_id, snapshot)
    return UserService(session, actor, snapshot)


class TestCreateUser:
    """Tests for create_user."""

    @pytest.mark.asyncio
    async def test_group_admin_creates_in_subgroup(self, db_session, org):
        service = await service_for(db_session, "admin2")

        user = await service.create_user("new@example.com", group_id="4", name="New")

        memberships = await UserRepository(db_session).get_memberships(user.id)
        assert [m.group_id for m in memberships] == ["4"]
        assert user.is_group_admin is False

    @pytest.mark.asyncio
    async def test_group_admin_cannot_create_in_sibling(self, db_session, org):
        service = await service_for(db_session, "admin2")

        with pytest.raises(PermissionDeniedError):
            await service.create_user("new@example.com", group_id="3")

        assert await UserRepository(db_session).email_exists("new@example.com") is False

    @pytest.mark.asyncio
    async def test_regular_user_cannot_create(self, db_session, org):
        service = await service_for(db_session, "member2")

        with pytest.raises(PermissionDeniedError):
            await service.create_user("new@example.com", group_id="2")

    @pytest.mark.asyncio
    async def test_group_admin_cannot_grant_super_admin(self, db_session, org):
        service = await service_for(db_session, "admin2")

        with pytest.raises(PermissionDeniedError, match="super admin"):
            await service.create_user("boss@example.com", group_id="4", is_super_admin=True)

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session, org):
        service = await service_for(db_session, "super")

        with pytest.raises(UserAlreadyExistsError):
            await service.create_user("member2@example.com", group_id="2")

    @pytest.mark.asyncio
    async def test_inactive_group(self, db_session, org):
        service = await service_for(db_session, "super")

        with pytest.raises(GroupNotFoundError):
            await service.create_user("new@example.com", group_id="99")


class TestUpdateUser:
    """Tests for update_user."""

    @pytest.mark.asyncio
    async def test_edit_in_scope_user(self, db_session, org):
        service = await service_for(db_session, "admin2")

        user = await service.update_user("member4", name="Renamed", is_group_admin=True)

        assert user.name == "Renamed"
        assert user.is_group_admin is True

    @pytest.mark.asyncio
    async def test_self_edit_denied(self, db_session, org):
        service = await service_for(db_session, "super")

        with pytest.raises(PermissionDeniedError):
            await service.update_user("super", name="Me")

    @pytest.mark.asyncio
    async def test_group_change_out_of_scope_applies_nothing(self, db_session, org):
        """A rejected destination leaves the profile untouched."""
        service = await service_for(db_session, "admin2")

        with pytest.raises(PermissionDeniedError):
            await service.update_user("member4", name="Changed", group_id="3")

        user = await UserRepository(db_session).get_by_id("member4")
        memberships = await UserRepository(db_session).get_memberships("member4")
        assert user.name == "Member4"
        assert [m.group_id for m in memberships] == ["4"]

    @pytest.mark.asyncio
    async def test_move_within_scope(self, db_session, org):
        service = await service_for(db_session, "admin2")

        await service.update_user("member4", group_id="2")

        memberships = await UserRepository(db_session).get_memberships("member4")
        assert [m.group_id for m in memberships] == ["2"]

    @pytest.mark.asyncio
    async def test_move_makes_destination_primary_over_secondary(self, db_session, org):
        db_session.add(
            UserGroupModel(user_id="member4", group_id="3", joined_at=datetime(2024, 1, 2))
        )
        await db_session.flush()
        service = await service_for(db_session, "super")

        await service.update_user("member4", group_id="2")

        _, target = await AccessContextService(db_session, mode="primary").get_target("member4")
        memberships = await UserRepository(db_session).get_memberships("member4")
        assert target.primary_group_id == "2"
        assert [m.group_id for m in memberships] == ["2"]

    @pytest.mark.asyncio
    async def test_move_to_existing_secondary_group(self, db_session, org):
        await UserRepository(db_session).add_membership("member4", "2")
        service = await service_for(db_session, "admin2")

        await service.update_user("member4", group_id="2")

        _, target = await AccessContextService(db_session, mode="primary").get_target("member4")
        memberships = await UserRepository(db_session).get_memberships("member4")
        assert target.primary_group_id == "2"
        assert [m.group_id for m in memberships] == ["2"]

    @pytest.mark.asyncio
    async def test_group_admin_cannot_edit_super_admin(self, db_session, org):
        service = await service_for(db_session, "admin2")

        with pytest.raises(PermissionDeniedError):
            await service.update_user("super", name="Demoted", is_super_admin=False)

    @pytest.mark.asyncio
    async def test_email_conflict(self, db_session, org):
        service = await service_for(db_session, "super")

        with pytest.raises(UserAlreadyExistsError):
            await service.update_user("member4", email="member2@example.com")

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session, org):
        service = await service_for(db_session, "super")

        with pytest.raises(UserNotFoundError):
            await service.update_user("ghost", name="Boo")


class TestListAndDeactivate:
    """Tests for list_accessible_users and deactivate_user."""

    @pytest.mark.asyncio
    async def test_group_admin_lists_scope_members(self, db_session, org):
        service = await service_for(db_session, "admin2")

        users, total = await service.list_accessible_users()

        assert total == 3
        assert {u.id for u in users} == {"admin2", "member2", "member4"}

    @pytest.mark.asyncio
    async def test_super_admin_lists_everyone(self, db_session, org):
        service = await service_for(db_session, "super")

        _, total = await service.list_accessible_users()

        assert total == 7

    @pytest.mark.asyncio
    async def test_deactivate_user(self, db_session, org):
        service = await service_for(db_session, "admin3")

        await service.deactivate_user("member3")

        assert (await UserRepository(db_session).get_by_id("member3")).is_active is False

    @pytest.mark.asyncio
    async def test_primary_group_ids(self, db_session, org):
        service = await service_for(db_session, "super")

        assert await service.get_primary_group_ids(["member4", "loner"]) == {
            "member4": "4",
            "loner": None,
        }
