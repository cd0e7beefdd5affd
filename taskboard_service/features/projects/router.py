"""API router for the projects feature.

Endpoints:
    GET    /projects/              - List projects (optionally by owner)
    GET    /projects/{project_id}  - Get a project
    POST   /projects/              - Create a project owned by the caller
    PUT    /projects/{project_id}  - Update (owner or admin)
    DELETE /projects/{project_id}  - Delete (owner or admin)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_service.core.dependencies.auth import AuthUserDep
from taskboard_service.core.dependencies.database import get_db_session
from taskboard_service.features.projects.schemas import (
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)
from taskboard_service.features.projects.service import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "/",
    response_model=list[ProjectResponse],
    summary="List projects",
)
async def list_projects(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    owner_id: Annotated[int | None, Query(alias="ownerId")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[ProjectResponse]:
    projects = await ProjectService(session).list_projects(
        owner_id=owner_id, limit=limit, offset=offset,
    )
    return [ProjectResponse.model_validate(p) for p in projects]


@router.get(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Get a project",
    responses={404: {"description": "Project not found"}},
)
async def get_project(
    project_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProjectResponse:
    project = await ProjectService(session).get_project(project_id)
    return ProjectResponse.model_validate(project)


@router.post(
    "/",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project",
    responses={401: {"description": "Not authenticated"}},
)
async def create_project(
    payload: ProjectCreate,
    user: AuthUserDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProjectResponse:
    """Create a project owned by the caller."""
    project = await ProjectService(session).create_project(payload, user)
    await session.commit()
    return ProjectResponse.model_validate(project)


@router.put(
    "/{project_id}",
    response_model=ProjectResponse,
    summary="Update a project",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Project not found"}},
)
async def update_project(
    project_id: int,
    payload: ProjectUpdate,
    user: AuthUserDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> ProjectResponse:
    project = await ProjectService(session).update_project(project_id, payload, user)
    await session.commit()
    return ProjectResponse.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a project",
    responses={403: {"description": "Not the owner"}, 404: {"description": "Project not found"}},
)
async def delete_project(
    project_id: int,
    user: AuthUserDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> None:
    """Delete a project together with its tasks."""
    await ProjectService(session).delete_project(project_id, user)
    await session.commit()
