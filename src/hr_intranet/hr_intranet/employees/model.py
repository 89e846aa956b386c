from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Thực thể miền (domain): Nhân viên.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    employee_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    dept_id: Optional[int] = None
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class Actor:
    """The employee performing the current request.

    Built by the controller from the session and passed explicitly to every
    service call; services never read request-global state.
    """

    employee_id: int
    name: str
    is_admin: bool = False

    @classmethod
    def from_employee(cls, employee: Employee) -> "Actor":
        return cls(employee_id=employee.employee_id, name=employee.full_name, is_admin=employee.is_admin)
