"""Session helpers shared by the Flask controllers."""

from __future__ import annotations

from functools import wraps

from flask import flash, redirect, render_template, session, url_for

from ..core.enums import Role
from ..employees.model import Actor


def current_actor() -> Actor:
    return Actor(
        employee_id=int(session["employee_id"]),
        name=session.get("name") or "",
        is_admin=session.get("role") == Role.ADMIN.value,
    )


def forbidden(message: str = ""):
    current_user = {"full_name": session.get("name"), "role": session.get("role")}
    return render_template("403.html", current_user=current_user, message=message), 403


def not_found(message: str = ""):
    return render_template("404.html", message=message), 404


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            flash("Vui lòng đăng nhập để tiếp tục!", "warning")
            return redirect(url_for("login"))
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return redirect(url_for("login"))
        if session.get("role") != Role.ADMIN.value:
            return forbidden()
        return view(*args, **kwargs)

    return wrapper
