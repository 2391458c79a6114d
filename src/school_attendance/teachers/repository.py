from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Teacher


class TeacherRepository(Protocol):
    """Repository interface for teachers.

    The service layer depends on this Protocol, never on a concrete database.
    """

    def list_all(self) -> Sequence[Teacher]:
        raise NotImplementedError

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_code(self, teacher_code: str) -> Optional[Teacher]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Teacher]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def list_codes(self) -> Sequence[str]:
        raise NotImplementedError

    def create(
        self,
        *,
        teacher_code: str,
        full_name: str,
        department: Optional[str],
        email: Optional[str] = None,
        phone: Optional[str] = None,
        join_date: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, teacher_id: int, **fields) -> bool:
        """Update the given columns; keys are Teacher attribute names."""

        raise NotImplementedError

    def delete(self, teacher_id: int) -> bool:
        raise NotImplementedError
