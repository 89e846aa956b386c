from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.enums import GoalRole, GoalStatus
from ..core.exceptions import AuthorizationError, DomainError, NotFoundError, ValidationError
from ..employees.model import Actor, Employee
from ..employees.repository import EmployeeRepository
from . import workflow
from .model import Goal, GoalDraft
from .repository import GoalRepository

logger = logging.getLogger(__name__)


def _parse_stage(stage) -> int:
    try:
        return int(stage)
    except (TypeError, ValueError):
        raise ValidationError("Cấp duyệt không hợp lệ")


@dataclass(frozen=True)
class GoalLists:
    mine: Sequence[Goal]
    awaiting_me: Sequence[Goal]


class GoalService:
    """Use cases around the two-stage goal approval workflow.

    Each public method is one read-modify-write of a single goal: load,
    run the pure transition, save once. A refused transition saves nothing.
    """

    def __init__(
        self,
        goals: GoalRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._goals = goals
        self._employees = employees
        self._clock = clock

    # -------- lookups --------
    def _require_goal(self, goal_id: int) -> Goal:
        goal = self._goals.get_by_id(int(goal_id))
        if not goal:
            raise NotFoundError("Mục tiêu không tồn tại")
        return goal

    def _resolve_approver(self, approver_id: Optional[int], *, required: bool = False) -> Optional[Employee]:
        if approver_id in (None, "", 0):
            if required:
                raise ValidationError("Vui lòng chọn người duyệt")
            return None
        try:
            employee_id = int(approver_id)
        except (TypeError, ValueError):
            raise ValidationError("Người duyệt không hợp lệ")
        employee = self._employees.get_by_id(employee_id)
        if not employee or not employee.is_active:
            raise NotFoundError("Người duyệt không tồn tại")
        return employee

    def _apply(self, actor: Actor, goal_id: int, step: str, transition: Callable[[Goal], Goal]) -> Goal:
        goal = self._require_goal(goal_id)
        try:
            updated = transition(goal)
        except AuthorizationError:
            logger.warning("Goal %s: %s refused for employee %s", goal_id, step, actor.employee_id)
            raise
        except DomainError as e:
            logger.info("Goal %s: %s rejected (%s)", goal_id, step, e)
            raise

        if not self._goals.save(updated):
            raise NotFoundError("Mục tiêu không tồn tại")
        logger.info(
            "Goal %s: %s by employee %s (%s -> %s)",
            goal_id,
            step,
            actor.employee_id,
            goal.status.value,
            updated.status.value,
        )
        return updated

    def get_goal(self, actor: Actor, goal_id: int) -> Goal:
        goal = self._require_goal(goal_id)
        involved = {goal.created_by, goal.current_approver} | {h.by for h in goal.history}
        if not actor.is_admin and actor.employee_id not in involved:
            raise AuthorizationError("Bạn không có quyền xem mục tiêu này")
        return goal

    def list_for(self, actor: Actor) -> GoalLists:
        mine = self._goals.find(created_by=actor.employee_id, limit=DEFAULT_LIST_LIMIT)
        awaiting: list[Goal] = []
        for status in (GoalStatus.PENDING1, GoalStatus.PENDING2):
            awaiting.extend(self._goals.find(status=status, approver_id=actor.employee_id, limit=DEFAULT_LIST_LIMIT))
        return GoalLists(mine=mine, awaiting_me=awaiting)

    def list_all(self, *, status: Optional[GoalStatus] = None) -> Sequence[Goal]:
        return self._goals.find(status=status, limit=DEFAULT_LIST_LIMIT)

    def approver_choices(self, actor: Actor) -> Sequence[Employee]:
        return [e for e in self._employees.list_active() if e.employee_id != actor.employee_id]

    def history_ui(self, goal: Goal) -> list[dict]:
        names: dict[int, str] = {}
        rows = []
        for h in goal.history:
            if h.by not in names:
                employee = self._employees.get_by_id(h.by)
                names[h.by] = employee.full_name if employee else f"#{h.by}"
            rows.append(
                {
                    "action": h.action.value,
                    "label": workflow.ACTION_LABELS[h.action],
                    "by": names[h.by],
                    "date": h.date.strftime("%Y-%m-%d %H:%M"),
                    "comment": h.comment or "",
                }
            )
        return rows

    # -------- author actions --------
    def create_goal(self, actor: Actor, draft: GoalDraft, *, approver_id: Optional[int] = None) -> int:
        approver = self._resolve_approver(approver_id)
        goal = workflow.create(actor, draft, approver=approver, now=self._clock())
        goal_id = self._goals.create(goal)
        logger.info("Goal %s created by employee %s", goal_id, actor.employee_id)
        return goal_id

    def edit_goal(self, actor: Actor, goal_id: int, draft: GoalDraft, *, approver_id: Optional[int] = None) -> Goal:
        def transition(goal: Goal) -> Goal:
            workflow.require_role(actor, goal, GoalRole.CREATOR)
            approver = self._resolve_approver(approver_id)
            return workflow.edit(actor, goal, draft, approver=approver, now=self._clock())

        return self._apply(actor, goal_id, "edit", transition)

    def delete_goal(self, actor: Actor, goal_id: int) -> None:
        goal = self._require_goal(goal_id)
        try:
            workflow.check_deletable(actor, goal)
        except AuthorizationError:
            logger.warning("Goal %s: delete refused for employee %s", goal_id, actor.employee_id)
            raise
        if not self._goals.delete(int(goal_id)):
            raise NotFoundError("Mục tiêu không tồn tại")
        logger.info("Goal %s deleted by employee %s", goal_id, actor.employee_id)

    def submit(self, actor: Actor, goal_id: int) -> Goal:
        return self._apply(actor, goal_id, "submit", lambda g: workflow.submit(actor, g, now=self._clock()))

    def evaluate(
        self,
        actor: Actor,
        goal_id: int,
        *,
        progress,
        grade: Optional[str],
        approver_id: Optional[int],
    ) -> Goal:
        def transition(goal: Goal) -> Goal:
            workflow.require_role(actor, goal, GoalRole.CREATOR)
            approver = self._resolve_approver(approver_id, required=True)
            return workflow.evaluate(actor, goal, progress=progress, grade=grade, approver=approver, now=self._clock())

        return self._apply(actor, goal_id, "evaluate", transition)

    # -------- approver actions --------
    def approve(self, actor: Actor, goal_id: int, *, stage) -> Goal:
        stage = _parse_stage(stage)
        if stage == 1:
            return self._apply(actor, goal_id, "approve1", lambda g: workflow.approve1(actor, g, now=self._clock()))
        if stage == 2:
            return self._apply(actor, goal_id, "approve2", lambda g: workflow.approve2(actor, g, now=self._clock()))
        raise ValidationError("Cấp duyệt không hợp lệ")

    def reject(self, actor: Actor, goal_id: int, *, stage, comment: str) -> Goal:
        stage = _parse_stage(stage)
        if stage == 1:
            return self._apply(
                actor, goal_id, "reject1", lambda g: workflow.reject1(actor, g, comment=comment, now=self._clock())
            )
        if stage == 2:
            return self._apply(
                actor, goal_id, "reject2", lambda g: workflow.reject2(actor, g, comment=comment, now=self._clock())
            )
        raise ValidationError("Cấp duyệt không hợp lệ")

