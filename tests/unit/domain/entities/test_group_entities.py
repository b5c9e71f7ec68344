"""Unit tests for group entities."""

import gc

import pytest

from groupscope.domain.entities.group import Group, GroupNode, UserGroupMembership


class TestGroup:
    """Tests for the Group dataclass."""

    def test_root_group(self):
        group = Group(id="g1", name="Head Office")

        assert group.is_root is True
        assert group.is_active is True
        assert group.description is None

    def test_child_group(self):
        group = Group(id="g2", name="Sales", parent_id="g1")

        assert group.is_root is False

    def test_requires_id(self):
        with pytest.raises(ValueError, match="Group ID is required"):
            Group(id="", name="Sales")

    def test_requires_name(self):
        with pytest.raises(ValueError, match="Group name is required"):
            Group(id="g1", name="")

    def test_self_parent_is_accepted(self):
        """Stored rows are taken as they are; the hierarchy builder repairs them."""
        group = Group(id="g1", name="Loop", parent_id="g1")

        assert group.parent_id == "g1"
        assert group.is_root is False


class TestGroupNode:
    """Tests for GroupNode parent links."""

    def test_attach_sets_parent_and_child(self):
        parent = GroupNode(Group(id="g1", name="Head Office"))
        child = GroupNode(Group(id="g2", name="Sales", parent_id="g1"))

        parent.attach(child)

        assert parent.children == [child]
        assert child.parent is parent
        assert child.is_root is False
        assert parent.is_root is True
        assert parent.parent is None

    def test_parent_link_is_weak(self):
        """The child does not keep its parent alive."""
        parent = GroupNode(Group(id="g1", name="Head Office"))
        child = GroupNode(Group(id="g2", name="Sales", parent_id="g1"))
        parent.attach(child)

        del parent
        gc.collect()

        assert child.parent is None

    def test_properties_delegate_to_group(self):
        node = GroupNode(Group(id="g2", name="Sales", parent_id="g1"))

        assert node.id == "g2"
        assert node.name == "Sales"
        assert node.parent_id == "g1"


def test_membership_defaults():
    membership = UserGroupMembership(user_id="u1", group_id="g1")

    assert membership.is_active is True
    assert membership.joined_at.tzinfo is not None
