"""In-memory stand-in for the remote persistence API."""

from __future__ import annotations

import itertools
from collections import defaultdict
from typing import Any, Callable, Mapping, Sequence

from onboardsys.remote import PostgrestError

RowPredicate = Callable[[dict[str, Any]], bool]


class InMemoryBackend:
    """Implements the ``TableClient`` protocol over plain dicts.

    Tag names are unique per owner, like the real schema. ``reject`` installs
    failures for inserts into a table, optionally only for matching rows.
    ``hide`` makes inserts into a table succeed without returning the row.
    """

    def __init__(self, user_id: str | None = "user-1") -> None:
        self.user_id = user_id
        self.tables: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.calls: list[tuple[str, str]] = []
        self._rules: list[tuple[str, RowPredicate | None, Exception]] = []
        self._ids = itertools.count(1)
        self._hidden: set[str] = set()

    def reject(self, table: str, error: Exception, when: RowPredicate | None = None) -> None:
        self._rules.append((table, when, error))

    def hide(self, table: str) -> None:
        self._hidden.add(table)

    def rows(self, table: str) -> list[dict[str, Any]]:
        return list(self.tables.get(table, []))

    def current_user_id(self) -> str | None:
        return self.user_id

    def insert(self, table: str, rows: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> list[dict[str, Any]]:
        self.calls.append(("insert", table))
        batch = [dict(rows)] if isinstance(rows, Mapping) else [dict(row) for row in rows]
        for row in batch:
            for rule_table, predicate, error in self._rules:
                if rule_table == table and (predicate is None or predicate(row)):
                    raise error
            if table == "tags" and any(
                existing.get("user_id") == row.get("user_id") and existing.get("name") == row.get("name")
                for existing in self.tables[table]
            ):
                raise PostgrestError(
                    "23505",
                    'duplicate key value violates unique constraint "tags_user_id_name_key"',
                    status=409,
                )

        created = []
        for row in batch:
            row.setdefault("id", f"{table}-{next(self._ids)}")
            self.tables[table].append(row)
            created.append(dict(row))
        if table in self._hidden:
            return []
        return created

    def select(self, table: str, filters: Mapping[str, Any], *, limit: int | None = None) -> list[dict[str, Any]]:
        self.calls.append(("select", table))
        matches = [dict(row) for row in self.tables.get(table, []) if self._matches(row, filters)]
        return matches[:limit] if limit is not None else matches

    def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        self.calls.append(("delete", table))
        self.tables[table] = [row for row in self.tables.get(table, []) if not self._matches(row, filters)]

    @staticmethod
    def _matches(row: Mapping[str, Any], filters: Mapping[str, Any]) -> bool:
        return all(row.get(column) == value for column, value in filters.items())
