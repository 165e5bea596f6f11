# tests/fakes.py

from __future__ import annotations

from types import SimpleNamespace
from typing import Any


class FakeQuery:
    """Just enough of the postgrest query builder for SupabaseStore"""

    def __init__(self, rows: dict[str, Any], fail: bool = False) -> None:
        self.rows = rows
        self.fail = fail
        self.op = "select"
        self.payload: Any = None
        self.filters: list[tuple[str, str]] = []
        self.limit_n: int | None = None

    def select(self, columns: str) -> "FakeQuery":
        self.op = "select"
        return self

    def upsert(self, payload: dict[str, Any]) -> "FakeQuery":
        self.op = "upsert"
        self.payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self.op = "delete"
        return self

    def eq(self, column: str, value: str) -> "FakeQuery":
        self.filters.append(("eq", value))
        return self

    def like(self, column: str, pattern: str) -> "FakeQuery":
        self.filters.append(("like", pattern))
        return self

    def limit(self, n: int) -> "FakeQuery":
        self.limit_n = n
        return self

    def _matches(self, key: str) -> bool:
        for kind, value in self.filters:
            if kind == "eq" and key != value:
                return False
            if kind == "like":
                # "_" is a single-char wildcard in LIKE
                prefix = value.rstrip("%")
                if len(key) < len(prefix) or any(
                    p != "_" and p != k for p, k in zip(prefix, key)
                ):
                    return False
        return True

    def execute(self) -> SimpleNamespace:
        if self.fail:
            raise RuntimeError("connection reset")
        if self.op == "upsert":
            self.rows[self.payload["key"]] = self.payload["value"]
            return SimpleNamespace(data=[self.payload])
        matched = [k for k in list(self.rows) if self._matches(k)]
        if self.op == "delete":
            for k in matched:
                del self.rows[k]
            return SimpleNamespace(data=[])
        data = [{"key": k, "value": self.rows[k]} for k in matched]
        if self.limit_n is not None:
            data = data[: self.limit_n]
        return SimpleNamespace(data=data)


class FakeSupabase:
    def __init__(self, fail: bool = False) -> None:
        self.rows: dict[str, Any] = {}
        self.fail = fail
        self.tables: list[str] = []

    def table(self, name: str) -> FakeQuery:
        self.tables.append(name)
        return FakeQuery(self.rows, fail=self.fail)
