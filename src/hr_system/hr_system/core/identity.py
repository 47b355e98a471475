from __future__ import annotations

from dataclasses import dataclass

from .enums import Role


@dataclass(frozen=True)
class Actor:
    """Identity resolved by the auth layer for the current request."""

    employee_id: int
    role: Role
    emp_code: str = ""

    @property
    def is_manager(self) -> bool:
        return self.role == Role.MANAGER

    @property
    def has_final_authority(self) -> bool:
        return self.role.has_final_authority
