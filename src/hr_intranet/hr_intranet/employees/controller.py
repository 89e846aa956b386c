from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, session, url_for

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["csrf_token"] = lambda: ""

    @app.route("/", methods=["GET", "POST"], endpoint="login")
    def login():
        if "employee_id" in session:
            return redirect(url_for("dashboard"))

        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                actor = container.auth_service.authenticate(username, password)

                session.permanent = bool(remember)
                session["employee_id"] = actor.employee_id
                session["name"] = actor.name
                session["role"] = Role.ADMIN.value if actor.is_admin else Role.STAFF.value

                flash("Đăng nhập thành công!", "success")
                return redirect(url_for("dashboard"))
            except AuthenticationError as e:
                flash(str(e), "danger")
            except Exception as e:
                logger.exception("Login failed unexpectedly")
                if bool(app.config.get("DEBUG", False)):
                    flash(f"Lỗi hệ thống khi đăng nhập: {e}", "danger")
                else:
                    flash("Lỗi hệ thống khi đăng nhập", "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.clear()
        flash("Đã đăng xuất hệ thống.", "info")
        return redirect(url_for("login"))
