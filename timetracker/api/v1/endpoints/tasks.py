"""
Task endpoints:
  GET    /tasks/project/{project_id}   – List tasks of a project
  POST   /tasks/project/{project_id}   – Create a task (Manager/Director)
  PUT    /tasks/{task_id}              – Update a task (Manager/Director)
  DELETE /tasks/{task_id}              – Delete a task (Manager/Director)
"""
from fastapi import APIRouter, Depends, status

from timetracker.core.dependencies import db_dependency, get_current_user, require_reviewer
from timetracker.models.user import User
from timetracker.schemas.project import TaskCreate, TaskResponse, TaskUpdate
from timetracker.services.task_service import TaskService

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get(
    "/project/{project_id}",
    response_model=list[TaskResponse],
    summary="List tasks of a project",
)
def list_tasks(
    project_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(get_current_user),
):
    return TaskService(conn).list_tasks(project_id)


@router.post(
    "/project/{project_id}",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a task (Manager/Director)",
)
def create_task(
    project_id: int,
    data: TaskCreate,
    conn=Depends(db_dependency),
    _: User = Depends(require_reviewer),
):
    """
    Create a task under a project.

    - **number**: must start with the first segment of the project number
      followed by `-` (project `20031-00` -> `20031-…`), suffix of 1–5 characters
    - **billing_type**: `HOURLY` or `UNIT` (UNIT needs `unit_price` and `unit_name`)
    """
    return TaskService(conn).create_task(project_id, data)


@router.put("/{task_id}", response_model=TaskResponse, summary="Update a task (Manager/Director)")
def update_task(
    task_id: int,
    data: TaskUpdate,
    conn=Depends(db_dependency),
    _: User = Depends(require_reviewer),
):
    return TaskService(conn).update_task(task_id, data)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task (Manager/Director)",
)
def delete_task(
    task_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(require_reviewer),
):
    TaskService(conn).delete_task(task_id)
