from __future__ import annotations

import logging

from werkzeug.security import check_password_hash

from ..core.exceptions import AuthenticationError
from .model import Actor
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate employee (login)."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, username: str, password: str) -> Actor:
        employee = self._employees.get_by_username((username or "").strip())
        if not employee or not employee.is_active:
            logger.warning("Login refused for unknown or inactive user %r", username)
            raise AuthenticationError("Sai tài khoản hoặc mật khẩu")

        try:
            ok = check_password_hash(employee.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.warning("Login refused for %r: wrong password", username)
            raise AuthenticationError("Sai tài khoản hoặc mật khẩu")

        return Actor.from_employee(employee)

