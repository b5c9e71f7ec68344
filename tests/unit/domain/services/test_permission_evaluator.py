"""Unit tests for permission decisions."""

import pytest

from groupscope.domain.entities.group import Group
from groupscope.domain.entities.permission import TargetUserSummary, UserPermission
from groupscope.domain.exceptions import PermissionDeniedError
from groupscope.domain.services.permission_evaluator import (
    can_change_user_group,
    can_create_root_group,
    can_create_user_in_group,
    can_edit_user,
    can_manage_group,
    can_manage_group_users,
    can_manage_membership,
    get_manageable_groups,
    validate_group_management,
    validate_membership_change,
    validate_user_creation,
    validate_user_edit,
    validate_user_group_assignment,
)


@pytest.fixture
def super_admin():
    return UserPermission(
        user_id="super",
        is_super_admin=True,
        primary_group_id="1",
        accessible_group_ids=frozenset({"1", "2", "3", "4"}),
    )


@pytest.fixture
def group_admin():
    """Group admin anchored on group 2 of the example forest."""
    return UserPermission(
        user_id="admin2",
        is_group_admin=True,
        primary_group_id="2",
        accessible_group_ids=frozenset({"2", "4"}),
    )


@pytest.fixture
def regular_user():
    return UserPermission(
        user_id="member2",
        primary_group_id="2",
        accessible_group_ids=frozenset({"2", "4"}),
    )


def _target(user_id, group_id=None, is_super_admin=False, is_group_admin=False):
    return TargetUserSummary(
        id=user_id,
        is_super_admin=is_super_admin,
        is_group_admin=is_group_admin,
        primary_group_id=group_id,
    )


class TestManageGroupUsers:
    """Tests for can_manage_group_users and its aliases."""

    def test_group_admin_in_and_out_of_scope(self, group_admin):
        assert can_manage_group_users(group_admin, "2") is True
        assert can_manage_group_users(group_admin, "4") is True
        assert can_manage_group_users(group_admin, "3") is False
        assert can_manage_group_users(group_admin, "1") is False

    def test_super_admin_manages_everything(self, super_admin):
        assert can_manage_group_users(super_admin, "3") is True
        assert can_manage_group_users(super_admin, "not-in-scope") is True

    def test_regular_user_manages_nothing(self, regular_user):
        assert can_manage_group_users(regular_user, "2") is False

    def test_creation_and_group_management_follow_same_rule(self, group_admin):
        assert can_create_user_in_group(group_admin, "4") is True
        assert can_create_user_in_group(group_admin, "3") is False
        assert can_manage_group(group_admin, "2") is True
        assert can_manage_group(group_admin, "1") is False

    def test_only_super_admin_creates_root_groups(self, super_admin, group_admin):
        assert can_create_root_group(super_admin) is True
        assert can_create_root_group(group_admin) is False


class TestEditUser:
    """Tests for the can_edit_user decision table."""

    def test_self_edit_denied_regardless_of_flags(self, super_admin, group_admin, regular_user):
        for actor in (super_admin, group_admin, regular_user):
            assert can_edit_user(actor, _target(actor.user_id, actor.primary_group_id)) is False

    def test_super_admin_edits_anyone_else(self, super_admin):
        assert can_edit_user(super_admin, _target("other", "3")) is True
        assert can_edit_user(super_admin, _target("other-super", is_super_admin=True)) is True
        assert can_edit_user(super_admin, _target("loner")) is True

    def test_group_admin_cannot_edit_super_admin_in_scope(self, group_admin):
        target = _target("sneaky", "4", is_super_admin=True)

        assert can_edit_user(group_admin, target) is False

    def test_group_admin_edits_in_scope_users(self, group_admin):
        assert can_edit_user(group_admin, _target("member4", "4")) is True
        assert can_edit_user(group_admin, _target("peer", "2", is_group_admin=True)) is True

    def test_group_admin_cannot_edit_out_of_scope(self, group_admin):
        assert can_edit_user(group_admin, _target("member3", "3")) is False
        assert can_edit_user(group_admin, _target("loner")) is False

    def test_regular_user_edits_nobody(self, regular_user):
        assert can_edit_user(regular_user, _target("member4", "4")) is False


class TestChangeUserGroup:
    """Tests for can_change_user_group."""

    def test_destination_out_of_scope(self, group_admin):
        """The target is editable but the destination is not reachable."""
        target = _target("member4", "4")

        assert can_edit_user(group_admin, target) is True
        assert can_change_user_group(group_admin, target, "3") is False

    def test_destination_in_scope(self, group_admin):
        assert can_change_user_group(group_admin, _target("member4", "4"), "2") is True

    def test_non_editable_target(self, group_admin):
        assert can_change_user_group(group_admin, _target("member3", "3"), "2") is False

    def test_super_admin_moves_anywhere(self, super_admin):
        assert can_change_user_group(super_admin, _target("member4", "4"), "elsewhere") is True


class TestManageMembership:
    """Tests for can_manage_membership."""

    def test_requires_group_rights(self, group_admin):
        assert can_manage_membership(group_admin, _target("member4", "4"), "3") is False

    def test_editable_target(self, group_admin):
        assert can_manage_membership(group_admin, _target("member4", "4"), "2") is True

    def test_claiming_unassigned_user(self, group_admin):
        assert can_manage_membership(group_admin, _target("loner"), "4") is True

    def test_cannot_claim_unassigned_super_admin(self, group_admin):
        assert can_manage_membership(group_admin, _target("root", is_super_admin=True), "4") is False

    def test_cannot_touch_other_branch_member(self, group_admin):
        assert can_manage_membership(group_admin, _target("member3", "3"), "2") is False


class TestManageableGroups:
    """Tests for get_manageable_groups."""

    def test_group_admin(self, group_admin, example_groups):
        result = get_manageable_groups(
            group_admin, example_groups, user_counts={"2": 3}, customer_counts={"4": 7}
        )

        assert [p.group_id for p in result] == ["2", "4"]
        assert result[0].user_count == 3
        assert result[0].customer_count == 0
        assert result[1].customer_count == 7
        assert all(p.can_manage for p in result)
        assert not any(p.is_root_group for p in result)

    def test_super_admin_sees_root(self, super_admin, example_groups):
        result = get_manageable_groups(super_admin, example_groups)

        assert [p.group_id for p in result] == ["1", "2", "3", "4"]
        assert result[0].is_root_group is True

    def test_regular_user(self, regular_user, example_groups):
        assert get_manageable_groups(regular_user, example_groups) == []

    def test_accepts_any_group_iterable(self, group_admin):
        groups = (Group(id=gid, name=gid) for gid in ("2", "3"))

        assert [p.group_id for p in get_manageable_groups(group_admin, groups)] == ["2"]


class TestValidators:
    """The validate_* wrappers raise PermissionDeniedError on denial."""

    def test_validate_user_creation(self, group_admin):
        validate_user_creation(group_admin, "4")
        with pytest.raises(PermissionDeniedError, match="create users in this group"):
            validate_user_creation(group_admin, "3")

    def test_validate_user_edit(self, group_admin):
        validate_user_edit(group_admin, _target("member4", "4"))
        with pytest.raises(PermissionDeniedError) as exc_info:
            validate_user_edit(group_admin, _target("admin2", "2"))
        assert "edit this user" in exc_info.value.reason

    def test_validate_user_group_assignment(self, group_admin):
        validate_user_group_assignment(group_admin, _target("member4", "4"), "2")
        with pytest.raises(PermissionDeniedError):
            validate_user_group_assignment(group_admin, _target("member4", "4"), "3")

    def test_validate_membership_change(self, group_admin):
        validate_membership_change(group_admin, _target("loner"), "2")
        with pytest.raises(PermissionDeniedError, match="manage users in this group"):
            validate_membership_change(group_admin, _target("loner"), "3")

    def test_validate_group_management(self, super_admin, group_admin):
        validate_group_management(super_admin, None)
        validate_group_management(group_admin, "4")
        with pytest.raises(PermissionDeniedError, match="root groups"):
            validate_group_management(group_admin, None)
        with pytest.raises(PermissionDeniedError):
            validate_group_management(group_admin, "1")

    def test_denial_is_a_permission_error(self, regular_user):
        with pytest.raises(PermissionError):
            validate_user_creation(regular_user, "2")
