"""
Group API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from contacts.schemas import ContactRequest, ContactResponse


class GroupRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=250)
    description: str = Field(default="", max_length=1000)


class GroupResponse(BaseModel):
    id: UUID
    created_at: datetime
    modified_at: datetime
    name: str
    description: str
    contact_count: int


class GroupListResponse(BaseModel):
    groups: list[GroupResponse]
    total: int
    limit: int
    offset: int


class CreateContactsIntoGroupRequest(BaseModel):
    contacts: list[ContactRequest] = Field(..., min_length=1, max_length=1000)


class AttachContactsRequest(BaseModel):
    contact_ids: list[UUID] = Field(..., max_length=10000)


class GroupContactsResponse(BaseModel):
    group_id: UUID
    contacts: list[ContactResponse]
    limit: int
    offset: int
