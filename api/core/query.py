"""
List query parameters: pagination and sorting.

Sort input is `name,-created_at` (a leading `-` means descending). Column names
are validated against an allowlist mapping API names to SQL expressions, so the
ORDER BY clause is never built from raw user input.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

DEFAULT_LIMIT = 100
MAX_LIMIT = 500


class QueryParameterError(ValueError):
    pass


@dataclass(frozen=True)
class Sort:
    column: str
    descending: bool = False


@dataclass(frozen=True)
class QueryParameter:
    limit: int = DEFAULT_LIMIT
    offset: int = 0
    sorts: tuple[Sort, ...] = field(default_factory=tuple)

    def order_by(self, allowed: Mapping[str, str], *, tiebreaker: str = "id") -> str:
        parts: list[str] = []
        for s in self.sorts:
            expression = allowed.get(s.column)
            if expression is None:
                raise QueryParameterError(f"Unsupported sort column: {s.column}")
            parts.append(f"{expression} {'DESC' if s.descending else 'ASC'}")
        if not parts:
            parts.append(f"{allowed.get('created_at', 'created_at')} DESC")
        parts.append(f"{tiebreaker} ASC")
        return "ORDER BY " + ", ".join(parts)


def parse_sorts(raw: str | None, allowed: Mapping[str, str]) -> tuple[Sort, ...]:
    sorts: list[Sort] = []
    seen: set[str] = set()
    for token in (raw or "").split(","):
        token = token.strip()
        if not token:
            continue
        descending = token.startswith("-")
        column = token.lstrip("-+").strip().lower()
        if column not in allowed:
            raise QueryParameterError(f"Unsupported sort column: {column or token}")
        if column in seen:
            continue
        seen.add(column)
        sorts.append(Sort(column=column, descending=descending))
    return tuple(sorts)


def build(
    *,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
    sort: str | None = None,
    allowed: Mapping[str, str],
) -> QueryParameter:
    return QueryParameter(
        limit=max(1, min(int(limit), MAX_LIMIT)),
        offset=max(0, int(offset)),
        sorts=parse_sorts(sort, allowed),
    )
