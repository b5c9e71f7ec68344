"""Unit tests for group-access filters."""

from dataclasses import dataclass

from sqlalchemy import Column, MetaData, String, Table
from sqlalchemy.dialects import sqlite

from groupscope.domain.services.query_filter import (
    GroupAccessFilter,
    access_where_clause,
    filter_by_group_access,
)

records = Table("records", MetaData(), Column("id", String), Column("group_id", String))


@dataclass
class Record:
    id: str
    group_id: str | None


def _sql(clause) -> str:
    return str(clause.compile(dialect=sqlite.dialect(), compile_kwargs={"literal_binds": True}))


def test_null_group_always_passes():
    items = [Record("a", None), Record("b", "2"), Record("c", "3")]

    assert [r.id for r in filter_by_group_access(items, set())] == ["a"]
    assert [r.id for r in filter_by_group_access(items, {"2", "4"})] == ["a", "b"]


def test_filter_preserves_order_and_supports_mappings():
    items = [
        {"id": "x", "group_id": "4"},
        {"id": "y", "group_id": None},
        {"id": "z", "group_id": "3"},
        {"id": "w"},
    ]

    assert [r["id"] for r in filter_by_group_access(items, {"4"})] == ["x", "y", "w"]


def test_access_where_clause_is_frozen():
    access = access_where_clause(["2", "4", "2"])

    assert isinstance(access, GroupAccessFilter)
    assert access.accessible_group_ids == frozenset({"2", "4"})
    assert access == access_where_clause({"4", "2"})


def test_matches():
    access = access_where_clause({"2"})

    assert access.matches(Record("a", "2")) is True
    assert access.matches(Record("b", None)) is True
    assert access.matches(Record("c", "3")) is False


def test_to_sqlalchemy_renders_null_or_in():
    sql = _sql(access_where_clause({"4", "2"}).to_sqlalchemy(records.c.group_id))

    assert "records.group_id IS NULL" in sql
    assert "records.group_id IN ('2', '4')" in sql
    assert " OR " in sql


def test_to_sqlalchemy_empty_scope_is_null_only():
    sql = _sql(access_where_clause([]).to_sqlalchemy(records.c.group_id))

    assert sql == "records.group_id IS NULL"
