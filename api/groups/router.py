"""
Group API endpoints, including group membership.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status

from contacts import service as contact_service
from core import query
from core.errors import store_errors

from . import schemas, service

router = APIRouter()

_GROUP_OR_CONTACT_NOT_FOUND = "Group or contact not found."


@router.post("/groups", status_code=status.HTTP_201_CREATED)
async def create_group(request: schemas.GroupRequest) -> schemas.GroupResponse:
    with store_errors():
        return await service.create_group(request)


@router.get("/groups")
async def list_groups(
    limit: int = Query(query.DEFAULT_LIMIT, ge=1, le=query.MAX_LIMIT),
    offset: int = Query(0, ge=0),
    sort: str | None = Query(default=None, max_length=200),
) -> schemas.GroupListResponse:
    return await service.list_groups(limit=limit, offset=offset, sort=sort)


@router.get("/groups/{group_id}")
async def get_group(group_id: UUID) -> schemas.GroupResponse:
    return await service.get_group(group_id)


@router.put("/groups/{group_id}")
async def update_group(group_id: UUID, request: schemas.GroupRequest) -> schemas.GroupResponse:
    with store_errors():
        return await service.update_group(group_id, request)


@router.delete("/groups/{group_id}")
async def delete_group(group_id: UUID) -> dict:
    with store_errors(not_found="Group not found."):
        return await service.delete_group(group_id)


@router.get("/groups/{group_id}/contacts")
async def list_group_contacts(
    group_id: UUID,
    limit: int = Query(query.DEFAULT_LIMIT, ge=1, le=query.MAX_LIMIT),
    offset: int = Query(0, ge=0),
    sort: str | None = Query(default=None, max_length=200),
) -> schemas.GroupContactsResponse:
    contacts, params = await service.list_group_contacts(group_id, limit=limit, offset=offset, sort=sort)
    return schemas.GroupContactsResponse(
        group_id=group_id,
        contacts=[contact_service.to_contact_response(c) for c in contacts],
        limit=params.limit,
        offset=params.offset,
    )


@router.post("/groups/{group_id}/contacts", status_code=status.HTTP_201_CREATED)
async def create_contacts_into_group(group_id: UUID, request: schemas.CreateContactsIntoGroupRequest) -> dict:
    """
    Create new contacts and attach them to the group atomically.
    """
    contacts = [contact_service.contact_from_request(c) for c in request.contacts]
    with store_errors(not_found="Group not found."):
        created = await service.create_contacts_into_group(group_id, contacts)
    return {
        "group_id": group_id,
        "contacts": [contact_service.to_contact_response(c) for c in created],
    }


@router.post("/groups/{group_id}/contacts/attach")
async def add_contacts_to_group(group_id: UUID, request: schemas.AttachContactsRequest) -> dict:
    """
    Attach existing contacts; ids that are already members are skipped.
    """
    with store_errors(not_found=_GROUP_OR_CONTACT_NOT_FOUND):
        added = await service.add_contacts_to_group(group_id, request.contact_ids)
    return {"ok": True, "group_id": group_id, "added": added}


@router.post("/groups/{group_id}/contacts/{contact_id}")
async def add_contact_to_group(group_id: UUID, contact_id: UUID) -> dict:
    with store_errors(not_found=_GROUP_OR_CONTACT_NOT_FOUND):
        added = await service.add_contact_to_group(group_id, contact_id)
    return {"ok": True, "group_id": group_id, "added": added}


@router.delete("/groups/{group_id}/contacts/{contact_id}")
async def delete_contact_from_group(group_id: UUID, contact_id: UUID) -> dict:
    with store_errors(not_found=_GROUP_OR_CONTACT_NOT_FOUND):
        await service.delete_contact_from_group(group_id, contact_id)
    return {"ok": True}
