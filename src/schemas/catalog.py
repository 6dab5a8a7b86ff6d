"""Schemas for the non-versioned watched tables (taxonomy, custom codes, media, users, common content)."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from src.models.enums import CodePosition


class TaxonomyIn(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100)
    description: str | None = None


class TaxonomyPatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None


class TaxonomyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    created_at: datetime
    updated_at: datetime


class CustomCodeIn(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    position: CodePosition = CodePosition.HEAD
    code: str
    active: bool = True


class CustomCodePatch(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    position: CodePosition | None = None
    code: str | None = None
    active: bool | None = None


class CustomCodeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    position: str
    code: str
    active: bool
    last_modified_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class MediaIn(BaseModel):
    filename: str = Field(min_length=1, max_length=255)
    storage_path: str = Field(min_length=1, max_length=1000)
    mime_type: str = Field(min_length=1, max_length=100)
    size_bytes: int = Field(default=0, ge=0)
    alt_text: str | None = Field(default=None, max_length=500)


class MediaPatch(BaseModel):
    filename: str | None = Field(default=None, min_length=1, max_length=255)
    alt_text: str | None = Field(default=None, max_length=500)


class MediaOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    filename: str
    storage_path: str
    mime_type: str
    size_bytes: int
    alt_text: str | None
    uploaded_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class UserProfileIn(BaseModel):
    """Profile for the calling identity; the id comes from the request."""

    email: str = Field(min_length=3, max_length=255)
    full_name: str | None = Field(default=None, max_length=200)
    avatar_url: str | None = Field(default=None, max_length=1000)


class UserProfilePatch(BaseModel):
    full_name: str | None = Field(default=None, max_length=200)
    avatar_url: str | None = Field(default=None, max_length=1000)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    email: str
    full_name: str | None
    role: str
    avatar_url: str | None
    created_at: datetime
    updated_at: datetime


class CommonContentIn(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    description: str | None = None
    data: dict[str, Any] | None = None
    active: bool | None = None


class CommonContentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    title: str | None
    description: str | None
    data: dict[str, Any]
    active: bool
    last_modified_by: uuid.UUID | None
    updated_at: datetime
