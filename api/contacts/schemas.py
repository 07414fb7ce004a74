"""
Contact API schemas (request/response models).
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ContactRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    phone_number: str = Field(..., min_length=1, max_length=50)
    name: str = Field(default="", max_length=50)
    surname: str = Field(default="", max_length=100)
    patronymic: str = Field(default="", max_length=100)
    email: str = Field(default="", max_length=250)
    age: int | None = Field(default=None, ge=0, le=200)
    gender: Literal["male", "female"] | None = None


class ContactResponse(BaseModel):
    id: UUID
    created_at: datetime
    modified_at: datetime
    phone_number: str
    name: str
    surname: str
    patronymic: str
    full_name: str
    email: str
    age: int | None
    gender: str | None


class ContactListResponse(BaseModel):
    contacts: list[ContactResponse]
    total: int
    limit: int
    offset: int
