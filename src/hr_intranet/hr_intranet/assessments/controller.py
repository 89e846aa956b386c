from __future__ import annotations

import logging

from flask import Flask, flash, render_template, request

from ..common.web import admin_required, current_actor, forbidden, not_found
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/assessments/test", methods=["GET", "POST"], endpoint="take_test")
    def take_test():
        questions = container.assessment_service.questions
        if request.method == "POST":
            answers = {q.key: request.form.get(q.key, "") for q in questions}
            try:
                submission_id, result = container.assessment_service.submit(
                    candidate_name=request.form.get("candidate_name", ""),
                    candidate_email=request.form.get("candidate_email", ""),
                    answers=answers,
                )
                return render_template(
                    "assessments/result.html",
                    submission_id=submission_id,
                    result=result,
                    questions=questions,
                )
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Grading test submission failed")
                flash("Lỗi hệ thống khi nộp bài", "danger")

        return render_template("assessments/take.html", questions=questions, answers=request.form)

    @app.route("/admin/assessments", methods=["GET"], endpoint="admin_assessments")
    @admin_required
    def admin_assessments():
        submissions = container.assessment_service.list_submissions(current_actor())
        return render_template("assessments/admin_list.html", submissions=submissions, active_page="admin_assessments")

    @app.route("/admin/assessments/<int:submission_id>", methods=["GET"], endpoint="admin_assessment_detail")
    @admin_required
    def admin_assessment_detail(submission_id: int):
        try:
            submission = container.assessment_service.get_submission(current_actor(), submission_id)
        except AuthorizationError as e:
            return forbidden(str(e))
        except NotFoundError as e:
            return not_found(str(e))
        return render_template(
            "assessments/admin_detail.html",
            submission=submission,
            questions=container.assessment_service.questions,
            active_page="admin_assessments",
        )
