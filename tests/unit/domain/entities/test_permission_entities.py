"""Unit tests for permission entities."""

import dataclasses

import pytest

from groupscope.domain.entities.permission import TargetUserSummary, UserPermission


def test_user_permission_coerces_scope_to_frozenset():
    permission = UserPermission(user_id="u1", accessible_group_ids={"g1", "g2"})

    assert isinstance(permission.accessible_group_ids, frozenset)
    assert permission.accessible_group_ids == frozenset({"g1", "g2"})


def test_user_permission_requires_user_id():
    with pytest.raises(ValueError, match="User ID is required"):
        UserPermission(user_id="")


def test_user_permission_is_immutable():
    permission = UserPermission(user_id="u1")

    with pytest.raises(dataclasses.FrozenInstanceError):
        permission.is_super_admin = True


def test_can_access_allows_ungrouped_and_in_scope():
    permission = UserPermission(user_id="u1", accessible_group_ids=frozenset({"g2"}))

    assert permission.can_access(None) is True
    assert permission.can_access("g2") is True
    assert permission.can_access("g3") is False


def test_target_summary_defaults():
    target = TargetUserSummary(id="u2")

    assert target.is_super_admin is False
    assert target.is_group_admin is False
    assert target.primary_group_id is None
