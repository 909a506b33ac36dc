"""
Task management service.

Task numbers must carry their project's prefix (see task_number_validator)
and be unique within the project. UNIT billing needs a unit price and unit
name; HOURLY billing clears both. The same rules apply on create and update.
"""
import sqlite3
from decimal import Decimal
from typing import Optional
import logging

from timetracker.core.exceptions import NotFoundError, ValidationError, parse_enum
from timetracker.models.project import BillingType, Project, Task
from timetracker.repositories.project_repository import ProjectRepository
from timetracker.repositories.task_repository import TaskRepository
from timetracker.schemas.project import TaskCreate, TaskUpdate
from timetracker.services.task_number_validator import validate_task_number

logger = logging.getLogger(__name__)


def _billing_fields(data: TaskCreate) -> tuple[BillingType, Optional[Decimal], Optional[str]]:
    billing_type = parse_enum(BillingType, data.billing_type, "billing type")
    if billing_type == BillingType.HOURLY:
        return billing_type, None, None
    if data.unit_price is None:
        logger.warning("UNIT task without unit price")
        raise ValidationError("Unit price is required for UNIT billing")
    if data.unit_price <= 0:
        raise ValidationError("Unit price must be positive")
    if data.unit_name is None or not data.unit_name.strip():
        logger.warning("UNIT task without unit name")
        raise ValidationError("Unit name is required for UNIT billing")
    return billing_type, data.unit_price, data.unit_name.strip()


class TaskService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing TaskService")
        self._repo = TaskRepository(conn)
        self._projects = ProjectRepository(conn)

    def _get_project(self, project_id: int) -> Project:
        project = self._projects.get_by_id(project_id)
        if project is None:
            logger.warning("Project id=%s not found", project_id)
            raise NotFoundError(f"Project with id={project_id} not found")
        return project

    def get_task(self, task_id: int) -> Task:
        task = self._repo.get_by_id(task_id)
        if task is None:
            logger.warning("Task id=%s not found", task_id)
            raise NotFoundError(f"Task with id={task_id} not found")
        return task

    def list_tasks(self, project_id: int) -> list[Task]:
        logger.info("Listing tasks for project id=%s", project_id)
        self._get_project(project_id)
        return self._repo.list_by_project(project_id)

    def create_task(self, project_id: int, data: TaskCreate) -> Task:
        logger.info("Creating task for project id=%s", project_id)
        project = self._get_project(project_id)
        number = validate_task_number(project.number, data.number)
        billing_type, unit_price, unit_name = _billing_fields(data)

        task = self._repo.create(
            project_id=project.id,
            title=data.title,
            description=data.description,
            number=number,
            billing_type=billing_type,
            unit_price=unit_price,
            unit_name=unit_name,
        )
        logger.info("Task created id=%s number=%s", task.id, task.number)
        return task

    def update_task(self, task_id: int, data: TaskUpdate) -> Task:
        logger.info("Updating task id=%s", task_id)
        task = self.get_task(task_id)
        project = self._get_project(task.project_id)
        number = validate_task_number(project.number, data.number)
        billing_type, unit_price, unit_name = _billing_fields(data)

        updated = self._repo.update(
            task_id=task.id,
            title=data.title,
            description=data.description,
            is_active=data.is_active,
            number=number,
            billing_type=billing_type,
            unit_price=unit_price,
            unit_name=unit_name,
        )
        if updated is None:
            logger.warning("Task id=%s disappeared during update", task.id)
            raise NotFoundError(f"Task with id={task.id} not found")
        logger.info("Task updated id=%s", task.id)
        return updated

    def delete_task(self, task_id: int) -> None:
        logger.info("Deleting task id=%s", task_id)
        if not self._repo.delete(task_id):
            logger.warning("Task id=%s not found for deletion", task_id)
            raise NotFoundError(f"Task with id={task_id} not found")
