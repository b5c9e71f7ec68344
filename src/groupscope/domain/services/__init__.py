"""Domain services for GroupScope.

Services contain the access-control logic: building the group forest,
resolving scopes, deciding permissions and filtering group-scoped records.
They never perform I/O.
"""

from groupscope.domain.services.access_scope import (
    create_user_permission,
    get_accessible_group_ids,
    get_accessible_group_ids_for_anchors,
    get_users_in_group_hierarchy,
    has_access_to_group,
    is_descendant,
    resolve_primary_group_id,
)
from groupscope.domain.services.group_tree import (
    build_hierarchy,
    calculate_group_stats,
    count_nodes,
    find_node,
    get_descendant_ids,
    get_path,
    iter_nodes,
)
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
from groupscope.domain.services.query_filter import (
    GroupAccessFilter,
    access_where_clause,
    filter_by_group_access,
)

__all__ = [
    "GroupAccessFilter",
    "access_where_clause",
    "build_hierarchy",
    "calculate_group_stats",
    "can_change_user_group",
    "can_create_root_group",
    "can_create_user_in_group",
    "can_edit_user",
    "can_manage_group",
    "can_manage_group_users",
    "can_manage_membership",
    "count_nodes",
    "create_user_permission",
    "filter_by_group_access",
    "find_node",
    "get_accessible_group_ids",
    "get_accessible_group_ids_for_anchors",
    "get_descendant_ids",
    "get_manageable_groups",
    "get_path",
    "get_users_in_group_hierarchy",
    "has_access_to_group",
    "is_descendant",
    "iter_nodes",
    "resolve_primary_group_id",
    "validate_group_management",
    "validate_membership_change",
    "validate_user_creation",
    "validate_user_edit",
    "validate_user_group_assignment",
]
