from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = "employee_id, full_name, username, password_hash, role, dept_id, is_active"


def _to_employee(row: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(row["employee_id"]),
        full_name=row["full_name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        dept_id=row.get("dept_id"),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def get_by_username(self, username: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_employee(row) if row else None

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE is_active=1 ORDER BY full_name")
            return [_to_employee(r) for r in fetchall(cur)]
