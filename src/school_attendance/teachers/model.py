from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Teacher:
    """Domain entity: a teacher on the roster.

    `department` is a free-text name matched against Department by value;
    it may be blank or refer to a department that no longer exists.
    """

    teacher_id: int
    teacher_code: str
    full_name: str
    department: Optional[str]
    email: Optional[str] = None
    phone: Optional[str] = None
    join_date: Optional[date] = None
    portal_username: Optional[str] = None
    portal_password_hash: Optional[str] = None
    portal_enabled: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.teacher_id,
            "teacherId": self.teacher_code,
            "name": self.full_name,
            "department": self.department,
            "email": self.email,
            "phone": self.phone,
            "joinDate": self.join_date.strftime("%Y-%m-%d") if self.join_date else None,
            "username": self.portal_username,
            "isPortalEnabled": self.portal_enabled,
        }

    def to_summary(self) -> dict:
        return {
            "id": self.teacher_id,
            "teacherId": self.teacher_code,
            "name": self.full_name,
            "department": self.department,
        }
