"""Pydantic schemas for the tasks feature."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskCreate(BaseModel):
    """Payload used when creating a task."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    project_id: int = Field(..., alias="projectId")
    assignee_id: int | None = Field(default=None, alias="assigneeId")


class TaskUpdate(BaseModel):
    """Payload for updating a task. Only provided fields change."""

    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    completed: bool | None = None
    assignee_id: int | None = Field(default=None, alias="assigneeId")

    @field_validator("title", "completed")
    @classmethod
    def reject_null(cls, v: object) -> object:
        if v is None:
            msg = "field cannot be null"
            raise ValueError(msg)
        return v


class TaskResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    completed: bool
    project_id: int
    assignee_id: int | None
    created_at: datetime
    updated_at: datetime


__all__ = ["TaskCreate", "TaskResponse", "TaskUpdate"]
