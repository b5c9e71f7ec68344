"""Group-access filters for stores and loaded collections.

The rule is the same everywhere: a record without a group is visible to
every actor, a record with a group is visible only when that group is in the
actor's accessible scope. Ungrouped and legacy records rely on the first
half of the rule to stay visible.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from sqlalchemy import ColumnElement, or_

T = TypeVar("T")


def _group_id_of(item: Any) -> str | None:
    if isinstance(item, Mapping):
        return item.get("group_id")
    return getattr(item, "group_id", None)


@dataclass(frozen=True)
class GroupAccessFilter:
    """Reusable predicate: ``group_id IS NULL OR group_id IN accessible_group_ids``."""

    accessible_group_ids: frozenset[str]

    def matches(self, item: Any) -> bool:
        """Apply the predicate to an object or mapping exposing ``group_id``."""
        group_id = _group_id_of(item)
        return group_id is None or group_id in self.accessible_group_ids

    def to_sqlalchemy(self, column: Any) -> ColumnElement[bool]:
        """Render the predicate against a SQLAlchemy column.

        An empty scope renders as ``column IS NULL`` alone.
        """
        if not self.accessible_group_ids:
            return column.is_(None)
        return or_(column.is_(None), column.in_(sorted(self.accessible_group_ids)))


def access_where_clause(accessible_group_ids: Iterable[str]) -> GroupAccessFilter:
    return GroupAccessFilter(frozenset(accessible_group_ids))


def filter_by_group_access(items: Iterable[T], accessible_group_ids: Iterable[str]) -> list[T]:
    """Keep the items an actor with the given scope may see, in input order."""
    access = access_where_clause(accessible_group_ids)
    return [item for item in items if access.matches(item)]
