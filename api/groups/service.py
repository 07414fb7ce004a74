"""
Group business logic.

Membership operations are plain pass-throughs to the repository; the
reconciliation itself (skip existing members, bulk insert, recount) lives
there so it shares one transaction.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status

from contacts.domain import Contact
from core import query

from . import repository, schemas
from .domain import Group


def _to_group_response(group: Group) -> schemas.GroupResponse:
    return schemas.GroupResponse(
        id=group.id,
        created_at=group.created_at,
        modified_at=group.modified_at,
        name=group.name,
        description=group.description,
        contact_count=group.contact_count,
    )


def _list_params(*, limit: int, offset: int, sort: str | None, allowed: dict[str, str]) -> query.QueryParameter:
    try:
        return query.build(limit=limit, offset=offset, sort=sort, allowed=allowed)
    except query.QueryParameterError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


async def create_group(payload: schemas.GroupRequest) -> schemas.GroupResponse:
    group = await repository.create_group(Group.new(name=payload.name, description=payload.description))
    return _to_group_response(group)


async def get_group(group_id: UUID) -> schemas.GroupResponse:
    group = await repository.get_group(group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found.")
    return _to_group_response(group)


async def list_groups(*, limit: int, offset: int, sort: str | None) -> schemas.GroupListResponse:
    params = _list_params(limit=limit, offset=offset, sort=sort, allowed=repository.SORTABLE_COLUMNS)
    groups = await repository.list_groups(params)
    total = await repository.count_groups()
    return schemas.GroupListResponse(
        groups=[_to_group_response(g) for g in groups],
        total=total,
        limit=params.limit,
        offset=params.offset,
    )


async def update_group(group_id: UUID, payload: schemas.GroupRequest) -> schemas.GroupResponse:
    group = await repository.update_group(group_id, name=payload.name, description=payload.description)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found.")
    return _to_group_response(group)


async def delete_group(group_id: UUID) -> dict[str, bool]:
    if not await repository.delete_group(group_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found.")
    return {"ok": True}


async def list_group_contacts(
    group_id: UUID,
    *,
    limit: int,
    offset: int,
    sort: str | None,
) -> tuple[list[Contact], query.QueryParameter]:
    params = _list_params(limit=limit, offset=offset, sort=sort, allowed=repository.MEMBER_SORTABLE_COLUMNS)
    if await repository.get_group(group_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found.")
    contacts = await repository.list_group_contacts(group_id, params)
    return contacts, params


async def create_contacts_into_group(group_id: UUID, contacts: list[Contact]) -> list[Contact]:
    return await repository.create_contacts_into_group(group_id, contacts)


async def add_contact_to_group(group_id: UUID, contact_id: UUID) -> list[UUID]:
    return await repository.add_contacts_to_group(group_id, [contact_id])


async def add_contacts_to_group(group_id: UUID, contact_ids: list[UUID]) -> list[UUID]:
    return await repository.add_contacts_to_group(group_id, contact_ids)


async def delete_contact_from_group(group_id: UUID, contact_id: UUID) -> None:
    await repository.delete_contact_from_group(group_id, contact_id)
