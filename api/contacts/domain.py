"""
Contact entity.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

GENDERS = ("male", "female")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Contact:
    id: UUID
    created_at: datetime
    modified_at: datetime
    phone_number: str
    name: str = ""
    surname: str = ""
    patronymic: str = ""
    email: str = ""
    age: int | None = None
    gender: str | None = None

    def __post_init__(self) -> None:
        if not self.phone_number:
            raise ValueError("Contact phone number is empty.")
        if self.gender is not None and self.gender not in GENDERS:
            raise ValueError(f"Unknown gender: {self.gender}")
        if self.age is not None and self.age < 0:
            raise ValueError("Contact age must not be negative.")

    @classmethod
    def new(
        cls,
        *,
        phone_number: str,
        name: str = "",
        surname: str = "",
        patronymic: str = "",
        email: str = "",
        age: int | None = None,
        gender: str | None = None,
        now: datetime | None = None,
    ) -> Contact:
        """
        Build a not-yet-persisted contact with a freshly assigned identity.
        """
        ts = now or utc_now()
        return cls(
            id=uuid4(),
            created_at=ts,
            modified_at=ts,
            phone_number=(phone_number or "").strip(),
            name=(name or "").strip(),
            surname=(surname or "").strip(),
            patronymic=(patronymic or "").strip(),
            email=(email or "").strip().lower(),
            age=age,
            gender=gender,
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Contact:
        return cls(
            id=UUID(str(row["id"])),
            created_at=row["created_at"],
            modified_at=row["modified_at"],
            phone_number=str(row["phone_number"]),
            name=str(row.get("name") or ""),
            surname=str(row.get("surname") or ""),
            patronymic=str(row.get("patronymic") or ""),
            email=str(row.get("email") or ""),
            age=row.get("age"),
            gender=row.get("gender"),
        )

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.surname, self.name, self.patronymic) if part)

    def with_changes(self, *, now: datetime | None = None, **changes: Any) -> Contact:
        """
        Return a copy with updated attributes; identity and `created_at` never change.
        """
        changes.pop("id", None)
        changes.pop("created_at", None)
        return dataclasses.replace(self, modified_at=now or utc_now(), **changes)

    def copy_record(self) -> tuple:
        # Column order must match repository.CONTACT_COLUMNS.
        return (
            self.id,
            self.created_at,
            self.modified_at,
            self.name,
            self.surname,
            self.patronymic,
            self.phone_number,
            self.email,
            self.age,
            self.gender,
        )
