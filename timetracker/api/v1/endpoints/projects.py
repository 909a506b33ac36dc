"""
Project endpoints:
  POST   /projects                – Create a project (Manager/Director)
  GET    /projects                – List projects
  GET    /projects/{id}           – Get a specific project
  PUT    /projects/{id}           – Update a project (Manager/Director)
  DELETE /projects/{id}           – Delete a project without entries (Manager/Director)
  GET    /projects/{id}/members   – List project members
  PUT    /projects/{id}/members   – Replace project members (Manager/Director)
"""
from fastapi import APIRouter, Depends, Query, status

from timetracker.core.dependencies import db_dependency, get_current_user, require_reviewer
from timetracker.models.user import User
from timetracker.schemas.project import ProjectCreate, ProjectMembers, ProjectResponse, ProjectUpdate
from timetracker.schemas.user import UserResponse
from timetracker.services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a project (Manager/Director)",
)
def create_project(
    data: ProjectCreate,
    conn=Depends(db_dependency),
    _: User = Depends(require_reviewer),
):
    return ProjectService(conn).create_project(data)


@router.get("", response_model=list[ProjectResponse], summary="List projects")
def list_projects(
    active_only: bool = Query(False, description="Only return active projects"),
    conn=Depends(db_dependency),
    _: User = Depends(get_current_user),
):
    return ProjectService(conn).list_projects(active_only=active_only)


@router.get("/{project_id}", response_model=ProjectResponse, summary="Get a project")
def get_project(
    project_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(get_current_user),
):
    return ProjectService(conn).get_project(project_id)


@router.put("/{project_id}", response_model=ProjectResponse, summary="Update a project (Manager/Director)")
def update_project(
    project_id: int,
    data: ProjectUpdate,
    conn=Depends(db_dependency),
    _: User = Depends(require_reviewer),
):
    """
    Replace name, number, description, manager and active flag.

    The part of **number** before the first `-` is fixed once the project has tasks.
    """
    return ProjectService(conn).update_project(project_id, data)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a project (Manager/Director)",
)
def delete_project(
    project_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(require_reviewer),
):
    """Tasks and memberships go with the project. Projects with time entries return 409."""
    ProjectService(conn).delete_project(project_id)


@router.get("/{project_id}/members", response_model=list[UserResponse], summary="List project members")
def list_members(
    project_id: int,
    conn=Depends(db_dependency),
    _: User = Depends(get_current_user),
):
    return ProjectService(conn).list_members(project_id)


@router.put(
    "/{project_id}/members",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Replace project members (Manager/Director)",
)
def replace_members(
    project_id: int,
    data: ProjectMembers,
    conn=Depends(db_dependency),
    _: User = Depends(require_reviewer),
):
    ProjectService(conn).replace_members(project_id, data.user_ids)
