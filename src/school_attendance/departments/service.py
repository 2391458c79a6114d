from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import NotFoundError, ValidationError
from .model import Department
from .repository import DepartmentRepository

logger = logging.getLogger(__name__)


class DepartmentService:
    """Use case: manage departments.

    Teachers refer to departments by name only, so renaming or deleting a
    department leaves existing teacher rows untouched.
    """

    def __init__(self, departments: DepartmentRepository):
        self._departments = departments

    def list_all(self) -> Sequence[Department]:
        return self._departments.list_all()

    def get(self, dept_id: int) -> Department:
        department = self._departments.get_by_id(dept_id)
        if not department:
            raise NotFoundError("Department not found")
        return department

    def create(self, *, name: Optional[str], description: Optional[str] = None) -> Department:
        name = require_non_empty(name, "name")
        if self._departments.get_by_name(name):
            raise ValidationError(f"Department {name} already exists")

        dept_id = self._departments.create(name=name, description=optional_text(description))
        logger.info("Department %s created (%s)", dept_id, name)
        return self.get(dept_id)

    def update(self, dept_id: int, **changes) -> Department:
        current = self.get(dept_id)
        name = require_non_empty(changes["name"], "name") if "name" in changes else current.name
        description = optional_text(changes["description"]) if "description" in changes else current.description

        clash = self._departments.get_by_name(name)
        if clash and clash.dept_id != current.dept_id:
            raise ValidationError(f"Department {name} already exists")

        self._departments.update(dept_id, name=name, description=description)
        logger.info("Department %s updated", dept_id)
        return self.get(dept_id)

    def delete(self, dept_id: int) -> None:
        if not self._departments.delete(dept_id):
            raise NotFoundError("Department not found")
        logger.info("Department %s deleted", dept_id)
