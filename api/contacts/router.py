"""
Contact API endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, status

from core import query
from core.errors import store_errors

from . import schemas, service

router = APIRouter()


@router.post("/contacts", status_code=status.HTTP_201_CREATED)
async def create_contact(request: schemas.ContactRequest) -> schemas.ContactResponse:
    with store_errors():
        return await service.create_contact(request)


@router.get("/contacts")
async def list_contacts(
    limit: int = Query(query.DEFAULT_LIMIT, ge=1, le=query.MAX_LIMIT),
    offset: int = Query(0, ge=0),
    sort: str | None = Query(default=None, max_length=200),
) -> schemas.ContactListResponse:
    return await service.list_contacts(limit=limit, offset=offset, sort=sort)


@router.get("/contacts/{contact_id}")
async def get_contact(contact_id: UUID) -> schemas.ContactResponse:
    return await service.get_contact(contact_id)


@router.put("/contacts/{contact_id}")
async def update_contact(contact_id: UUID, request: schemas.ContactRequest) -> schemas.ContactResponse:
    with store_errors():
        return await service.update_contact(contact_id, request)


@router.delete("/contacts/{contact_id}")
async def delete_contact(contact_id: UUID) -> dict:
    with store_errors(not_found="Contact not found."):
        return await service.delete_contact(contact_id)
