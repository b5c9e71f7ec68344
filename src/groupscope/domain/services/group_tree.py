"""Group hierarchy construction and traversal.

The hierarchy is rebuilt from a flat list of groups for every access-control
computation. Read-side construction never fails on malformed data:

- A group whose parent is missing from the input becomes a root. The input
  is usually "all active groups", so a child of a soft-deleted group stays
  in the forest instead of disappearing, and its own scope is unaffected.
- When parent references form a cycle (a self-parented group included), the
  cycle member that comes first in the input is promoted to a root.
- Duplicate IDs keep their first occurrence.

Traversals track visited IDs, so a forest whose children lists were
modified into a cycle after construction still yields finite results.
"""

from collections.abc import Iterable, Iterator

from groupscope.core.logging import get_logger
from groupscope.domain.entities.group import Group, GroupNode, GroupStats

logger = get_logger(__name__)


def build_hierarchy(groups: Iterable[Group]) -> list[GroupNode]:
    """Build a forest from an unordered flat list of groups.

    Args:
        groups: Groups to arrange. Any subset of the store is accepted.

    Returns:
        Root nodes in input order, each with children populated recursively.
        Sibling order follows input order. Every distinct input group appears
        exactly once in the result.
    """
    nodes: dict[str, GroupNode] = {}
    order: list[str] = []
    for group in groups:
        if group.id in nodes:
            logger.warning("Duplicate group ignored while building hierarchy", group_id=group.id)
            continue
        nodes[group.id] = GroupNode(group=group)
        order.append(group.id)

    parent_of: dict[str, str | None] = {}
    for group_id in order:
        parent_id = nodes[group_id].group.parent_id
        if parent_id is not None and parent_id not in nodes:
            logger.debug(
                "Parent group not in snapshot, treating group as root",
                group_id=group_id,
                parent_id=parent_id,
            )
            parent_id = None
        parent_of[group_id] = parent_id

    _break_cycles(order, parent_of)

    roots: list[GroupNode] = []
    for group_id in order:
        parent_id = parent_of[group_id]
        if parent_id is None:
            roots.append(nodes[group_id])
        else:
            nodes[parent_id].attach(nodes[group_id])
    return roots


def _break_cycles(order: list[str], parent_of: dict[str, str | None]) -> None:
    """Detach one member of every parent cycle, in place."""
    position = {group_id: index for index, group_id in enumerate(order)}
    resolved: set[str] = set()

    for start in order:
        path: list[str] = []
        on_path: set[str] = set()
        current = start
        while current is not None and current not in resolved:
            if current in on_path:
                cycle = path[path.index(current):]
                breaker = min(cycle, key=position.__getitem__)
                logger.warning(
                    "Cycle in group parents, promoting group to root",
                    group_id=breaker,
                    cycle=cycle,
                )
                parent_of[breaker] = None
                break
            on_path.add(current)
            path.append(current)
            current = parent_of[current]
        resolved.update(path)


def iter_nodes(forest: Iterable[GroupNode]) -> Iterator[tuple[GroupNode, int]]:
    """Yield ``(node, depth)`` pairs in pre-order. Roots have depth 1."""
    stack = [(node, 1) for node in reversed(list(forest))]
    seen: set[str] = set()
    while stack:
        node, depth = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        yield node, depth
        stack.extend((child, depth + 1) for child in reversed(node.children))


def find_node(group_id: str, forest: Iterable[GroupNode]) -> GroupNode | None:
    """Find the node for ``group_id`` by depth-first search."""
    for node, _ in iter_nodes(forest):
        if node.id == group_id:
            return node
    return None


def get_descendant_ids(group_id: str, forest: Iterable[GroupNode]) -> list[str]:
    """Return the IDs of every group below ``group_id``, in pre-order.

    The group itself is not included. Unknown groups and leaves return an
    empty list.
    """
    node = find_node(group_id, forest)
    if node is None:
        return []

    descendants: list[str] = []
    seen = {node.id}
    stack = list(reversed(node.children))
    while stack:
        child = stack.pop()
        if child.id in seen:
            continue
        seen.add(child.id)
        descendants.append(child.id)
        stack.extend(reversed(child.children))
    return descendants


def get_path(group_id: str, forest: Iterable[GroupNode]) -> list[Group]:
    """Return the groups from a root down to and including ``group_id``.

    Returns an empty list if the group is not in the forest.
    """
    stack: list[tuple[GroupNode, tuple[Group, ...]]] = [
        (node, ()) for node in reversed(list(forest))
    ]
    seen: set[str] = set()
    while stack:
        node, ancestors = stack.pop()
        if node.id in seen:
            continue
        seen.add(node.id)
        path = ancestors + (node.group,)
        if node.id == group_id:
            return list(path)
        stack.extend((child, path) for child in reversed(node.children))
    return []


def count_nodes(forest: Iterable[GroupNode]) -> int:
    return sum(1 for _ in iter_nodes(forest))


def calculate_group_stats(forest: list[GroupNode]) -> GroupStats:
    """Count groups and roots and measure the depth of a forest.

    User and customer totals are left at zero; they live in the store and
    are filled in by the caller.
    """
    total = 0
    max_depth = 0
    for _, depth in iter_nodes(forest):
        total += 1
        max_depth = max(max_depth, depth)
    return GroupStats(total_groups=total, root_groups=len(forest), max_depth=max_depth)
