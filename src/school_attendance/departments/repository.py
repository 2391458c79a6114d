from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_id(self, dept_id: int) -> Optional[Department]:
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def create(self, *, name: str, description: Optional[str] = None) -> int:
        raise NotImplementedError

    def update(self, dept_id: int, *, name: str, description: Optional[str]) -> bool:
        raise NotImplementedError

    def delete(self, dept_id: int) -> bool:
        raise NotImplementedError
