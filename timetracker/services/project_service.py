"""
Project management service.

A project's number prefix is shared by all of its task numbers, so the prefix
cannot change while tasks exist. Projects with time entries cannot be deleted.
"""
import sqlite3
from typing import Optional
import logging

from timetracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from timetracker.models.project import Project
from timetracker.models.user import User
from timetracker.repositories.project_repository import ProjectRepository
from timetracker.repositories.task_repository import TaskRepository
from timetracker.repositories.user_repository import UserRepository
from timetracker.schemas.project import ProjectCreate, ProjectUpdate
from timetracker.services.task_number_validator import required_prefix

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing ProjectService")
        self._repo = ProjectRepository(conn)
        self._tasks = TaskRepository(conn)
        self._users = UserRepository(conn)

    def get_project(self, project_id: int) -> Project:
        logger.info("Fetching project id=%s", project_id)
        project = self._repo.get_by_id(project_id)
        if project is None:
            logger.warning("Project id=%s not found", project_id)
            raise NotFoundError(f"Project with id={project_id} not found")
        return project

    def list_projects(self, active_only: bool = False) -> list[Project]:
        logger.info("Listing projects active_only=%s", active_only)
        return self._repo.list_all(active_only=active_only)

    def create_project(self, data: ProjectCreate) -> Project:
        logger.info("Creating project number=%s", data.number)
        self._check_manager(data.manager_id)
        project = self._repo.create(
            name=data.name,
            number=data.number.strip(),
            description=data.description,
            manager_id=data.manager_id,
        )
        logger.info("Project created id=%s", project.id)
        return project

    def update_project(self, project_id: int, data: ProjectUpdate) -> Project:
        logger.info("Updating project id=%s", project_id)
        project = self.get_project(project_id)
        self._check_manager(data.manager_id)

        number = data.number.strip()
        if required_prefix(number) != required_prefix(project.number) and self._tasks.list_by_project(project.id):
            logger.warning("Prefix change of project id=%s with tasks rejected", project.id)
            raise ValidationError(
                f"Project number prefix cannot change while the project has tasks "
                f"(tasks use {required_prefix(project.number)})"
            )

        updated = self._repo.update(
            project_id=project.id,
            name=data.name,
            number=number,
            description=data.description,
            manager_id=data.manager_id,
            is_active=data.is_active,
        )
        if updated is None:
            logger.warning("Project id=%s disappeared during update", project.id)
            raise NotFoundError(f"Project with id={project.id} not found")
        logger.info("Project updated id=%s", project.id)
        return updated

    def delete_project(self, project_id: int) -> None:
        """Delete a project with its tasks and memberships; refused while entries reference it."""
        logger.info("Deleting project id=%s", project_id)
        project = self.get_project(project_id)
        entries = self._repo.count_time_entries(project.id)
        if entries:
            logger.warning("Project id=%s still has %s time entries", project.id, entries)
            raise ConflictError(
                f"Project has {entries} time entries and cannot be deleted. Deactivate it instead."
            )
        self._repo.delete(project.id)
        logger.info("Project deleted id=%s", project.id)

    # ------------------------------------------------------------------
    # Members
    # ------------------------------------------------------------------

    def list_members(self, project_id: int) -> list[User]:
        logger.info("Listing members of project id=%s", project_id)
        self.get_project(project_id)
        return self._repo.list_members(project_id)

    def replace_members(self, project_id: int, user_ids: list[int]) -> list[User]:
        """Replace the member set; duplicates collapse, unknown users are rejected."""
        logger.info("Replacing members of project id=%s", project_id)
        self.get_project(project_id)
        unique_ids = list(dict.fromkeys(user_ids))
        for user_id in unique_ids:
            if self._users.get_by_id(user_id) is None:
                logger.warning("Member user id=%s not found", user_id)
                raise NotFoundError(f"User with id={user_id} not found")
        self._repo.replace_members(project_id, unique_ids)
        return self._repo.list_members(project_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_manager(self, manager_id: Optional[int]) -> None:
        if manager_id is not None and self._users.get_by_id(manager_id) is None:
            logger.warning("Manager id=%s not found", manager_id)
            raise NotFoundError(f"User with id={manager_id} not found")
