from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from types import SimpleNamespace

import pytest
from flask import Flask

from src.hr_intranet.hr_intranet.core.exceptions import AuthenticationError
from src.hr_intranet.hr_intranet.employees.controller import register as register_employees
from src.hr_intranet.hr_intranet.employees.model import Actor

TEMPLATES = Path(__file__).resolve().parents[2] / "templates"


class FakeAuthService:
    def authenticate(self, username, password):
        if (username, password) != ("admin", "admin123"):
            raise AuthenticationError("Sai tài khoản hoặc mật khẩu")
        return Actor(employee_id=9, name="Admin Demo", is_admin=True)


@pytest.fixture
def app():
    app = Flask(__name__, template_folder=str(TEMPLATES))
    app.secret_key = "test"
    app.config["TESTING"] = True
    app.permanent_session_lifetime = timedelta(days=3)

    register_employees(app, SimpleNamespace(auth_service=FakeAuthService()))
    # endpoints linked from the login page
    app.add_url_rule("/dashboard", endpoint="dashboard", view_func=lambda: "ok")
    app.add_url_rule("/assessments/test", endpoint="take_test", view_func=lambda: "ok")
    return app


def test_login_sets_session_without_touching_app_config(app):
    client = app.test_client()

    resp = client.post("/", data={"username": "admin", "password": "admin123", "remember_me": "1"})

    assert resp.status_code == 302
    assert resp.headers["Location"].endswith("/dashboard")
    assert app.permanent_session_lifetime == timedelta(days=3)
    with client.session_transaction() as sess:
        assert sess["employee_id"] == 9
        assert sess["role"] == "admin"
        assert sess.permanent


def test_wrong_password_stays_on_login_page(app):
    client = app.test_client()

    resp = client.post("/", data={"username": "admin", "password": "nope"})

    assert resp.status_code == 200
    assert "Sai tài khoản hoặc mật khẩu".encode() in resp.data
    with client.session_transaction() as sess:
        assert "employee_id" not in sess
