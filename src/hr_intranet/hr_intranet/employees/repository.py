from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Giao diện repository cho Employee.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError
