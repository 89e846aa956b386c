from __future__ import annotations

import logging

from flask import Flask, flash, redirect, render_template, request, url_for

from ..common.datetime_utils import parse_optional_date
from ..common.validators import require_choice
from ..common.web import current_actor, forbidden, login_required, not_found
from ..core.enums import GoalLevel, GoalRole, GoalStatus
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..container import Container
from .model import GoalDraft
from .workflow import STATUS_LABELS, can_act

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    app.jinja_env.globals["goal_status_label"] = lambda s: STATUS_LABELS.get(GoalStatus(s), s)

    def _draft_from_form() -> GoalDraft:
        return GoalDraft(
            title=request.form.get("title", ""),
            description=request.form.get("description", ""),
            action_plan=request.form.get("action_plan", ""),
            goal_level=require_choice(request.form.get("goal_level") or GoalLevel.MEDIUM.value, "Mức độ", GoalLevel),
            deadline=parse_optional_date(request.form.get("deadline"), "Hạn hoàn thành"),
        )

    def _run(goal_id: int, action, success_message: str):
        """Run one workflow action and map domain errors to HTTP responses."""
        try:
            action()
            flash(success_message, "success")
        except AuthorizationError as e:
            return forbidden(str(e))
        except NotFoundError as e:
            return not_found(str(e))
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Goal %s: unexpected error", goal_id)
            flash("Lỗi hệ thống khi xử lý mục tiêu", "danger")
        return redirect(url_for("goal_detail", goal_id=goal_id))

    @app.route("/goals", methods=["GET"], endpoint="goals")
    @login_required
    def goals():
        actor = current_actor()
        lists = container.goal_service.list_for(actor)
        all_goals = container.goal_service.list_all() if actor.is_admin else []
        return render_template(
            "goals/index.html",
            mine=lists.mine,
            awaiting_me=lists.awaiting_me,
            all_goals=all_goals,
            active_page="goals",
        )

    @app.route("/goals/new", methods=["GET", "POST"], endpoint="new_goal")
    @login_required
    def new_goal():
        actor = current_actor()
        if request.method == "POST":
            try:
                goal_id = container.goal_service.create_goal(
                    actor,
                    _draft_from_form(),
                    approver_id=request.form.get("approver_id") or None,
                )
                flash("Đã tạo mục tiêu", "success")
                return redirect(url_for("goal_detail", goal_id=goal_id))
            except (ValidationError, NotFoundError) as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Creating goal failed")
                flash("Lỗi hệ thống khi tạo mục tiêu", "danger")

        return render_template(
            "goals/form.html",
            goal=None,
            approvers=container.goal_service.approver_choices(actor),
            levels=list(GoalLevel),
            active_page="new_goal",
        )

    @app.route("/goals/<int:goal_id>", methods=["GET"], endpoint="goal_detail")
    @login_required
    def goal_detail(goal_id: int):
        actor = current_actor()
        try:
            goal = container.goal_service.get_goal(actor, goal_id)
        except AuthorizationError as e:
            return forbidden(str(e))
        except NotFoundError as e:
            return not_found(str(e))

        return render_template(
            "goals/detail.html",
            goal=goal,
            history=container.goal_service.history_ui(goal),
            is_creator=can_act(actor, goal, GoalRole.CREATOR),
            is_approver=can_act(actor, goal, GoalRole.APPROVER),
            approvers=container.goal_service.approver_choices(actor),
            active_page="goals",
        )

    @app.route("/goals/<int:goal_id>/edit", methods=["GET", "POST"], endpoint="edit_goal")
    @login_required
    def edit_goal(goal_id: int):
        actor = current_actor()
        if request.method == "POST":
            try:
                container.goal_service.edit_goal(
                    actor,
                    goal_id,
                    _draft_from_form(),
                    approver_id=request.form.get("approver_id") or None,
                )
                flash("Đã cập nhật mục tiêu", "success")
                return redirect(url_for("goal_detail", goal_id=goal_id))
            except AuthorizationError as e:
                return forbidden(str(e))
            except NotFoundError as e:
                return not_found(str(e))
            except ValidationError as e:
                flash(str(e), "danger")
            except Exception:
                logger.exception("Goal %s: edit failed", goal_id)
                flash("Lỗi hệ thống khi cập nhật mục tiêu", "danger")

        try:
            goal = container.goal_service.get_goal(actor, goal_id)
        except AuthorizationError as e:
            return forbidden(str(e))
        except NotFoundError as e:
            return not_found(str(e))

        return render_template(
            "goals/form.html",
            goal=goal,
            approvers=container.goal_service.approver_choices(actor),
            levels=list(GoalLevel),
            active_page="goals",
        )

    @app.route("/goals/<int:goal_id>/delete", methods=["POST"], endpoint="delete_goal")
    @login_required
    def delete_goal(goal_id: int):
        try:
            container.goal_service.delete_goal(current_actor(), goal_id)
            flash("Đã xóa mục tiêu", "success")
            return redirect(url_for("goals"))
        except AuthorizationError as e:
            return forbidden(str(e))
        except NotFoundError as e:
            return not_found(str(e))
        except ValidationError as e:
            flash(str(e), "danger")
        except Exception:
            logger.exception("Goal %s: delete failed", goal_id)
            flash("Lỗi hệ thống khi xóa mục tiêu", "danger")
        return redirect(url_for("goal_detail", goal_id=goal_id))

    @app.route("/goals/<int:goal_id>/submit", methods=["POST"], endpoint="submit_goal")
    @login_required
    def submit_goal(goal_id: int):
        actor = current_actor()
        return _run(goal_id, lambda: container.goal_service.submit(actor, goal_id), "Đã gửi duyệt mục tiêu")

    @app.route("/goals/<int:goal_id>/approve", methods=["POST"], endpoint="approve_goal")
    @login_required
    def approve_goal(goal_id: int):
        actor = current_actor()
        stage = request.form.get("stage", "")
        return _run(
            goal_id,
            lambda: container.goal_service.approve(actor, goal_id, stage=stage),
            "Đã duyệt mục tiêu",
        )

    @app.route("/goals/<int:goal_id>/reject", methods=["POST"], endpoint="reject_goal")
    @login_required
    def reject_goal(goal_id: int):
        actor = current_actor()
        stage = request.form.get("stage", "")
        comment = request.form.get("comment", "")
        return _run(
            goal_id,
            lambda: container.goal_service.reject(actor, goal_id, stage=stage, comment=comment),
            "Đã từ chối mục tiêu",
        )

    @app.route("/goals/<int:goal_id>/evaluate", methods=["POST"], endpoint="evaluate_goal")
    @login_required
    def evaluate_goal(goal_id: int):
        actor = current_actor()
        return _run(
            goal_id,
            lambda: container.goal_service.evaluate(
                actor,
                goal_id,
                progress=request.form.get("progress"),
                grade=request.form.get("grade", ""),
                approver_id=request.form.get("approver_id") or None,
            ),
            "Đã gửi đánh giá và chuyển duyệt cấp 2",
        )
