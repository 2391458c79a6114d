from __future__ import annotations

import logging
import re
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import parse_date_arg
from ..common.validators import optional_text, require_bool, require_min_length, require_non_empty
from ..core.constants import TEACHER_CODE_PREFIX, TEACHER_CODE_WIDTH
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from .model import Teacher
from .repository import TeacherRepository

logger = logging.getLogger(__name__)

_CODE_RE = re.compile(rf"^{TEACHER_CODE_PREFIX}(\d+)$")


class TeacherService:
    """Use case: manage the teacher roster and teacher portal accounts."""

    def __init__(self, teachers: TeacherRepository, attendance: AttendanceRepository):
        self._teachers = teachers
        self._attendance = attendance

    def list_all(self) -> Sequence[Teacher]:
        return self._teachers.list_all()

    def get(self, teacher_id: int) -> Teacher:
        teacher = self._teachers.get_by_id(teacher_id)
        if not teacher:
            raise NotFoundError("Teacher not found")
        return teacher

    def next_code(self) -> str:
        """Next T### code after the highest numeric code in use."""
        highest = 0
        for code in self._teachers.list_codes():
            m = _CODE_RE.match(code or "")
            if m:
                highest = max(highest, int(m.group(1)))
        return f"{TEACHER_CODE_PREFIX}{highest + 1:0{TEACHER_CODE_WIDTH}d}"

    def create(
        self,
        *,
        full_name: Optional[str],
        department: Optional[str] = None,
        teacher_code: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        join_date=None,
    ) -> Teacher:
        full_name = require_non_empty(full_name, "name")
        code = optional_text(teacher_code) or self.next_code()
        if self._teachers.get_by_code(code):
            raise ValidationError(f"Teacher ID {code} already exists")

        teacher_id = self._teachers.create(
            teacher_code=code,
            full_name=full_name,
            department=optional_text(department),
            email=optional_text(email),
            phone=optional_text(phone),
            join_date=self._optional_date(join_date),
        )
        logger.info("Teacher %s created (%s)", teacher_id, code)
        return self.get(teacher_id)

    def update(self, teacher_id: int, **changes) -> Teacher:
        """Apply a partial update; keys are Teacher attribute names."""

        current = self.get(teacher_id)
        fields: dict = {}

        if "full_name" in changes:
            fields["full_name"] = require_non_empty(changes["full_name"], "name")
        if "teacher_code" in changes:
            code = require_non_empty(changes["teacher_code"], "teacherId")
            clash = self._teachers.get_by_code(code)
            if clash and clash.teacher_id != current.teacher_id:
                raise ValidationError(f"Teacher ID {code} already exists")
            fields["teacher_code"] = code
        for key in ("department", "email", "phone"):
            if key in changes:
                fields[key] = optional_text(changes[key])
        if "join_date" in changes:
            fields["join_date"] = self._optional_date(changes["join_date"])

        if fields:
            self._teachers.update(teacher_id, **fields)
            logger.info("Teacher %s updated: %s", teacher_id, ", ".join(sorted(fields)))
        return self.get(teacher_id)

    def delete(self, teacher_id: int) -> None:
        self.get(teacher_id)
        if self._attendance.count_for_teacher(teacher_id) > 0:
            raise ValidationError("Teacher has attendance records and cannot be deleted")
        self._teachers.delete(teacher_id)
        logger.info("Teacher %s deleted", teacher_id)

    def set_portal_credentials(
        self,
        teacher_id: int,
        *,
        username: Optional[str],
        password: Optional[str] = None,
        enabled: bool = True,
    ) -> Teacher:
        teacher = self.get(teacher_id)
        username = require_non_empty(username, "username")
        enabled = require_bool(enabled, "isPortalEnabled")

        owner = self._teachers.get_by_username(username)
        if owner and owner.teacher_id != teacher.teacher_id:
            raise ValidationError("Username is already taken")

        fields: dict = {"portal_username": username, "portal_enabled": enabled}
        if password:
            require_min_length(password, "password", 6)
            fields["portal_password_hash"] = generate_password_hash(password)
        elif enabled and not teacher.portal_password_hash:
            raise ValidationError("password is required to enable the portal")

        self._teachers.update(teacher_id, **fields)
        logger.info("Portal credentials updated for teacher %s (enabled=%s)", teacher_id, enabled)
        return self.get(teacher_id)

    def authenticate_portal(self, username: str, password: str) -> Teacher:
        teacher = self._teachers.get_by_username((username or "").strip())
        if not teacher or not teacher.portal_enabled or not teacher.portal_password_hash:
            raise AuthenticationError("Invalid credentials or portal not enabled")

        try:
            ok = check_password_hash(teacher.portal_password_hash, password or "")
        except ValueError:
            # placeholder or corrupted hash values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")
        return teacher

    @staticmethod
    def _optional_date(value) -> Optional[date]:
        if value is None or isinstance(value, date):
            return value
        return parse_date_arg(value, "joinDate")
