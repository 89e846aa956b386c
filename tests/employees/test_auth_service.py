from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.hr_intranet.hr_intranet.core.enums import Role
from src.hr_intranet.hr_intranet.core.exceptions import AuthenticationError
from src.hr_intranet.hr_intranet.employees.model import Employee
from src.hr_intranet.hr_intranet.employees.service import AuthService


class FakeEmployeesRepo:
    def __init__(self, employees):
        self._by_username = {e.username: e for e in employees}

    def get_by_username(self, username):
        return self._by_username.get(username)


@pytest.fixture
def service():
    employees = [
        Employee(1, "Admin Demo", "admin", generate_password_hash("admin123"), Role.ADMIN),
        Employee(2, "Nguyen Van A", "nguyenvana", generate_password_hash("staff123"), Role.STAFF),
        Employee(3, "Nghi Viec", "nghiviec", generate_password_hash("staff123"), Role.STAFF, is_active=False),
        Employee(4, "Chua Dat", "chuadat", "CHANGE_ME", Role.STAFF),
    ]
    return AuthService(FakeEmployeesRepo(employees))


def test_login_returns_actor(service):
    actor = service.authenticate(" admin ", "admin123")
    assert actor.employee_id == 1
    assert actor.is_admin

    staff = service.authenticate("nguyenvana", "staff123")
    assert staff.name == "Nguyen Van A"
    assert not staff.is_admin


@pytest.mark.parametrize(
    "username,password",
    [
        ("admin", "wrong"),
        ("nobody", "admin123"),
        ("nghiviec", "staff123"),
        ("chuadat", "CHANGE_ME"),
        ("", ""),
    ],
)
def test_login_refused(service, username, password):
    with pytest.raises(AuthenticationError):
        service.authenticate(username, password)
