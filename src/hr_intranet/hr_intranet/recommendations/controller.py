from __future__ import annotations

import logging

from flask import Flask, flash, render_template

from ..common.web import current_actor, login_required
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        try:
            data = container.recommendation_service.for_employee(current_actor())
        except Exception:
            logger.exception("Building dashboard failed")
            flash("Không tải được gợi ý cho bảng điều khiển", "danger")
            data = None

        return render_template(
            "dashboard.html",
            summary=data.summary if data else None,
            recommendations=data.recommendations if data else [],
            active_page="dashboard",
        )
