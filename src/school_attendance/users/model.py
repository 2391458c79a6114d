from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a back-office account (administrator or data entry)."""

    user_id: int
    username: str
    password_hash: str
    role: Role
    full_name: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "username": self.username,
            "name": self.full_name,
            "role": self.role.value,
            "isActive": self.is_active,
        }
