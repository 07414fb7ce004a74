"""
Group entity and membership reconciliation helpers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from contacts.domain import utc_now


@dataclass(frozen=True)
class Group:
    id: UUID
    created_at: datetime
    modified_at: datetime
    name: str
    description: str = ""
    contact_count: int = 0

    @classmethod
    def new(cls, *, name: str, description: str = "", now: datetime | None = None) -> Group:
        name = (name or "").strip()
        if not name:
            raise ValueError("Group name is empty.")
        ts = now or utc_now()
        return cls(
            id=uuid4(),
            created_at=ts,
            modified_at=ts,
            name=name,
            description=(description or "").strip(),
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Group:
        return cls(
            id=UUID(str(row["id"])),
            created_at=row["created_at"],
            modified_at=row["modified_at"],
            name=str(row["name"]),
            description=str(row.get("description") or ""),
            contact_count=int(row.get("contact_count") or 0),
        )


def existence_map(candidates: Iterable[UUID], existing: Iterable[UUID]) -> dict[UUID, bool]:
    """
    Map every candidate id to whether it is already a member.

    Existing ids are marked first, then every candidate not seen is back-filled
    with False, so each candidate appears exactly once as a key.
    """
    mapping: dict[UUID, bool] = {contact_id: True for contact_id in existing}
    for contact_id in candidates:
        mapping.setdefault(contact_id, False)
    return mapping


def filter_new_contact_ids(candidates: Iterable[UUID], existence: Mapping[UUID, bool]) -> list[UUID]:
    """
    Return the candidates that are not members yet, as a new list.

    First-seen order is kept and repeated ids collapse into one, since a group
    holds a contact at most once.
    """
    result: list[UUID] = []
    seen: set[UUID] = set()
    for contact_id in candidates:
        if existence.get(contact_id, False) or contact_id in seen:
            continue
        seen.add(contact_id)
        result.append(contact_id)
    return result
