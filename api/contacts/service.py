"""
Contact business logic.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status

from core import query

from . import repository, schemas
from .domain import Contact


def to_contact_response(contact: Contact) -> schemas.ContactResponse:
    return schemas.ContactResponse(
        id=contact.id,
        created_at=contact.created_at,
        modified_at=contact.modified_at,
        phone_number=contact.phone_number,
        name=contact.name,
        surname=contact.surname,
        patronymic=contact.patronymic,
        full_name=contact.full_name,
        email=contact.email,
        age=contact.age,
        gender=contact.gender,
    )


def contact_from_request(payload: schemas.ContactRequest) -> Contact:
    return Contact.new(
        phone_number=payload.phone_number,
        name=payload.name,
        surname=payload.surname,
        patronymic=payload.patronymic,
        email=payload.email,
        age=payload.age,
        gender=payload.gender,
    )


def list_params(*, limit: int, offset: int, sort: str | None) -> query.QueryParameter:
    try:
        return query.build(limit=limit, offset=offset, sort=sort, allowed=repository.SORTABLE_COLUMNS)
    except query.QueryParameterError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


async def create_contact(payload: schemas.ContactRequest) -> schemas.ContactResponse:
    created = await repository.create_contacts([contact_from_request(payload)])
    return to_contact_response(created[0])


async def get_contact(contact_id: UUID) -> schemas.ContactResponse:
    contact = await repository.get_contact(contact_id)
    if contact is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found.")
    return to_contact_response(contact)


async def list_contacts(*, limit: int, offset: int, sort: str | None) -> schemas.ContactListResponse:
    params = list_params(limit=limit, offset=offset, sort=sort)
    contacts = await repository.list_contacts(params)
    total = await repository.count_contacts()
    return schemas.ContactListResponse(
        contacts=[to_contact_response(c) for c in contacts],
        total=total,
        limit=params.limit,
        offset=params.offset,
    )


async def update_contact(contact_id: UUID, payload: schemas.ContactRequest) -> schemas.ContactResponse:
    existing = await repository.get_contact(contact_id)
    if existing is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found.")

    changed = existing.with_changes(
        phone_number=payload.phone_number,
        name=payload.name,
        surname=payload.surname,
        patronymic=payload.patronymic,
        email=payload.email.lower(),
        age=payload.age,
        gender=payload.gender,
    )
    updated = await repository.update_contact(changed)
    if updated is None:
        # Deleted between the read and the write.
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found.")
    return to_contact_response(updated)


async def delete_contact(contact_id: UUID) -> dict[str, bool]:
    deleted = await repository.delete_contact(contact_id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found.")
    return {"ok": True}
