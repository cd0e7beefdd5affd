"""API router for the tasks feature.

Endpoints:
    GET    /tasks/?projectId=&assigneeId=  - List tasks
    GET    /tasks/{task_id}                - Get a task
    POST   /tasks/                         - Create a task
    PUT    /tasks/{task_id}                - Update (assignee, project owner or admin)
    DELETE /tasks/{task_id}                - Delete (assignee, project owner or admin)
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard_service.core.dependencies.auth import AuthUserDep
from taskboard_service.core.dependencies.database import get_db_session
from taskboard_service.features.tasks.schemas import TaskCreate, TaskResponse, TaskUpdate
from taskboard_service.features.tasks.service import TaskService

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.get(
    "/",
    response_model=list[TaskResponse],
    summary="List tasks",
    description="List tasks, optionally filtered by project and/or assignee.",
)
async def list_tasks(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    project_id: Annotated[int | None, Query(alias="projectId")] = None,
    assignee_id: Annotated[int | None, Query(alias="assigneeId")] = None,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[TaskResponse]:
    tasks = await TaskService(session).list_tasks(
        project_id=project_id, assignee_id=assignee_id, limit=limit, offset=offset,
    )
    return [TaskResponse.model_validate(t) for t in tasks]


@router.get(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Get a task",
    responses={404: {"description": "Task not found"}},
)
async def get_task(
    task_id: int,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> TaskResponse:
    task = await TaskService(session).get_task(task_id)
    return TaskResponse.model_validate(task)


@router.post(
    "/",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task",
    responses={404: {"description": "Project or assignee not found"}},
)
async def create_task(
    payload: TaskCreate,
    user: AuthUserDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> TaskResponse:
    task = await TaskService(session).create_task(payload, user)
    await session.commit()
    return TaskResponse.model_validate(task)


@router.put(
    "/{task_id}",
    response_model=TaskResponse,
    summary="Update a task",
    responses={403: {"description": "Not permitted"}, 404: {"description": "Task not found"}},
)
async def update_task(
    task_id: int,
    payload: TaskUpdate,
    user: AuthUserDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> TaskResponse:
    task = await TaskService(session).update_task(task_id, payload, user)
    await session.commit()
    return TaskResponse.model_validate(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses={403: {"description": "Not permitted"}, 404: {"description": "Task not found"}},
)
async def delete_task(
    task_id: int,
    user: AuthUserDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> None:
    await TaskService(session).delete_task(task_id, user)
    await session.commit()
