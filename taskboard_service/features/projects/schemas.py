"""Pydantic schemas for the projects feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProjectCreate(BaseModel):
    """Payload used when creating a project. The owner is the caller."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)


class ProjectUpdate(BaseModel):
    """Payload for updating a project. Only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)

    @field_validator("name")
    @classmethod
    def reject_null_name(cls, v: str | None) -> str:
        if v is None:
            msg = "name cannot be null"
            raise ValueError(msg)
        return v


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    owner_id: int
    created_at: datetime
    updated_at: datetime


__all__ = ["ProjectCreate", "ProjectResponse", "ProjectUpdate"]
