"""
In-memory stand-in for the supabase-py query builder.

Supports the subset the services use:
    client.table(name).select(cols, count="exact") / insert / update / delete
        .eq(col, value) .or_("a.eq.x,and(b.eq.y,c.eq.z)")
        .order(col, desc=...) .limit(n) .execute()

Rows are plain dicts. Defaults mimic the database: uuid ids, increasing
created_at, profiles.profile_visibility = "public",
friendships.status = "pending". Unique violations raise postgrest APIError
with code 23505 so conflict handling can be exercised.
"""

import copy
import itertools
import uuid
from typing import Any, Callable, Dict, List, Optional

from postgrest.exceptions import APIError

Row = Dict[str, Any]
Predicate = Callable[[Row], bool]

_UNIQUE_COLUMNS = {
    "profiles": ("id", "username"),
    "restaurants": ("id",),
    "friendships": ("id",),
}

_TABLE_DEFAULTS = {
    "profiles": {"username": None, "profile_visibility": "public", "currency": "USD"},
    "restaurants": {"is_public": True, "tags": [], "dietary_tags": [], "context_tags": []},
    "friendships": {"status": "pending"},
}

# alias -> (table, foreign key column) for embedded selects
_EMBEDS = {
    "requester": ("profiles", "requester_id"),
    "addressee": ("profiles", "addressee_id"),
}


class FakeResult:
    def __init__(self, data: List[Row], count: Optional[int] = None):
        self.data = data
        self.count = count


def _split_top_level(expr: str) -> List[str]:
    """Split on commas that are not inside parentheses."""
    parts, depth, current = [], 0, ""
    for char in expr:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    if current:
        parts.append(current)
    return [p.strip() for p in parts if p.strip()]


def _parse_condition(term: str) -> Predicate:
    if term.startswith("and(") and term.endswith(")"):
        subs = [_parse_condition(t) for t in _split_top_level(term[4:-1])]
        return lambda row: all(p(row) for p in subs)
    if term.startswith("or(") and term.endswith(")"):
        subs = [_parse_condition(t) for t in _split_top_level(term[3:-1])]
        return lambda row: any(p(row) for p in subs)

    column, op, value = term.split(".", 2)
    if op == "eq":
        return lambda row: str(row.get(column)) == value
    if op == "is" and value == "null":
        return lambda row: row.get(column) is None
    raise NotImplementedError(f"Unsupported filter operator: {op}")


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self._db = db
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._payload: Any = None
        self._filters: List[Predicate] = []
        self._order: Optional[tuple] = None
        self._limit: Optional[int] = None
        self._count: Optional[str] = None

    # --- operations ---

    def select(self, columns: str = "*", count: Optional[str] = None, **_: Any) -> "FakeQuery":
        self._op = "select"
        self._columns = columns
        self._count = count
        return self

    def insert(self, payload: Any) -> "FakeQuery":
        self._op = "insert"
        self._payload = payload
        return self

    def update(self, payload: Row) -> "FakeQuery":
        self._op = "update"
        self._payload = payload
        return self

    def delete(self) -> "FakeQuery":
        self._op = "delete"
        return self

    # --- modifiers ---

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def or_(self, expr: str) -> "FakeQuery":
        subs = [_parse_condition(t) for t in _split_top_level(expr)]
        self._filters.append(lambda row: any(p(row) for p in subs))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self._order = (column, desc)
        return self

    def limit(self, n: int) -> "FakeQuery":
        self._limit = n
        return self

    # --- execution ---

    def _matches(self, row: Row) -> bool:
        return all(p(row) for p in self._filters)

    def _embed(self, row: Row) -> Row:
        out = copy.deepcopy(row)
        for alias, (table, fk) in _EMBEDS.items():
            if f"{alias}:" in self._columns:
                target = next(
                    (r for r in self._db.tables[table] if r.get("id") == row.get(fk)),
                    None,
                )
                out[alias] = (
                    {"id": target["id"], "username": target.get("username")}
                    if target else None
                )
        return out

    def execute(self) -> FakeResult:
        self._db.calls.append((self._table, self._op))
        if self._db.fail_on is not None and self._db.fail_on in (self._table, "*"):
            raise APIError({"message": "simulated storage failure", "code": "XX000"})

        rows = self._db.tables[self._table]

        if self._op == "insert":
            payloads = self._payload if isinstance(self._payload, list) else [self._payload]
            created = [self._db._insert(self._table, p) for p in payloads]
            return FakeResult(copy.deepcopy(created))

        matched = [row for row in rows if self._matches(row)]

        if self._op == "update":
            for row in matched:
                self._db._check_unique(self._table, self._payload, exclude=row)
                row.update(copy.deepcopy(self._payload))
            return FakeResult(copy.deepcopy(matched))

        if self._op == "delete":
            self._db.tables[self._table] = [row for row in rows if not self._matches(row)]
            return FakeResult(copy.deepcopy(matched))

        if self._order:
            column, desc = self._order
            matched = sorted(matched, key=lambda r: str(r.get(column) or ""), reverse=desc)
        total = len(matched)
        if self._limit is not None:
            matched = matched[: self._limit]

        return FakeResult(
            [self._embed(row) for row in matched],
            count=total if self._count == "exact" else None,
        )


class FakeSupabase:
    """Minimal fake of supabase.Client backed by dict rows."""

    def __init__(self):
        self.tables: Dict[str, List[Row]] = {
            "profiles": [],
            "restaurants": [],
            "friendships": [],
        }
        self.calls: List[tuple] = []
        self.fail_on: Optional[str] = None
        self._clock = itertools.count(1)

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def _timestamp(self) -> str:
        return f"2025-01-01T00:00:00.{next(self._clock):06d}+00:00"

    def _check_unique(self, table: str, row: Row, exclude: Optional[Row] = None) -> None:
        for column in _UNIQUE_COLUMNS.get(table, ()):
            value = row.get(column)
            if value is None:
                continue
            for existing in self.tables[table]:
                if existing is not exclude and existing.get(column) == value:
                    raise APIError({
                        "message": f"duplicate key value violates unique constraint on {column}",
                        "code": "23505",
                    })

    def _insert(self, table: str, payload: Row) -> Row:
        row = copy.deepcopy(_TABLE_DEFAULTS.get(table, {}))
        row.update(copy.deepcopy(payload))
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._timestamp())
        self._check_unique(table, row)
        self.tables[table].append(row)
        return row

    def count_calls(self, table: str) -> int:
        return sum(1 for t, _ in self.calls if t == table)

    # --- seeding helpers for tests ---

    def add_profile(self, user_id: str, username: Optional[str] = None, **fields: Any) -> Row:
        return self._insert("profiles", {"id": user_id, "username": username, **fields})

    def add_restaurant(self, user_id: str, name: str, **fields: Any) -> Row:
        payload = {
            "user_id": user_id,
            "name": name,
            "address": fields.pop("address", f"{name} Street 1"),
            "place_id": fields.pop("place_id", f"place-{name.lower().replace(' ', '-')}"),
            "currency": fields.pop("currency", "USD"),
            **fields,
        }
        return self._insert("restaurants", payload)

    def add_friendship(self, requester_id: str, addressee_id: str, status: str = "pending") -> Row:
        return self._insert("friendships", {
            "requester_id": requester_id,
            "addressee_id": addressee_id,
            "status": status,
        })
