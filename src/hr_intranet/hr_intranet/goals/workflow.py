"""Goal approval state machine.

Pure functions: every transition takes the acting employee explicitly, checks
the guard, and returns a *new* Goal with the status moved and one or more
history entries appended. Nothing here touches the database or the session.

    draft --submit1--> pending1 --approve1--> approved1 --evaluate/submit2--> pending2 --approve2--> completed
                          |                                                      |
                          +--reject1--> rejected <--------------reject2----------+
                                           |
                                           +--submit1 (resume)--> pending1 | pending2
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Dict, Optional, Tuple

from ..common.validators import require_int_in_range, require_non_empty
from ..core.constants import MAX_PROGRESS, MIN_PROGRESS
from ..core.enums import GoalAction, GoalRole, GoalStatus
from ..core.exceptions import AuthorizationError, ValidationError
from ..employees.model import Actor, Employee
from .model import Goal, GoalDraft, HistoryEntry

TRANSITIONS: Dict[Tuple[GoalStatus, GoalAction], GoalStatus] = {
    (GoalStatus.DRAFT, GoalAction.SUBMIT1): GoalStatus.PENDING1,
    (GoalStatus.PENDING1, GoalAction.APPROVE1): GoalStatus.APPROVED1,
    (GoalStatus.PENDING1, GoalAction.REJECT1): GoalStatus.REJECTED,
    (GoalStatus.APPROVED1, GoalAction.SUBMIT2): GoalStatus.PENDING2,
    (GoalStatus.PENDING2, GoalAction.APPROVE2): GoalStatus.COMPLETED,
    (GoalStatus.PENDING2, GoalAction.REJECT2): GoalStatus.REJECTED,
    (GoalStatus.REJECTED, GoalAction.SUBMIT1): GoalStatus.PENDING1,
    (GoalStatus.REJECTED, GoalAction.SUBMIT2): GoalStatus.PENDING2,
}

EDITABLE_STATUSES = frozenset({GoalStatus.DRAFT, GoalStatus.APPROVED1, GoalStatus.REJECTED})
DELETABLE_STATUSES = frozenset({GoalStatus.DRAFT})
PENDING_STATUSES = frozenset({GoalStatus.PENDING1, GoalStatus.PENDING2})

ACTION_LABELS: Dict[GoalAction, str] = {
    GoalAction.CREATE: "Tạo mục tiêu",
    GoalAction.EDIT: "Chỉnh sửa",
    GoalAction.DELETE: "Xóa",
    GoalAction.EVALUATE: "Tự đánh giá",
    GoalAction.SUBMIT1: "Gửi duyệt cấp 1",
    GoalAction.APPROVE1: "Duyệt cấp 1",
    GoalAction.REJECT1: "Từ chối cấp 1",
    GoalAction.SUBMIT2: "Gửi duyệt cấp 2",
    GoalAction.APPROVE2: "Duyệt cấp 2",
    GoalAction.REJECT2: "Từ chối cấp 2",
}

STATUS_LABELS: Dict[GoalStatus, str] = {
    GoalStatus.DRAFT: "Nháp",
    GoalStatus.PENDING1: "Chờ duyệt cấp 1",
    GoalStatus.APPROVED1: "Đã duyệt cấp 1",
    GoalStatus.PENDING2: "Chờ duyệt cấp 2",
    GoalStatus.COMPLETED: "Hoàn thành",
    GoalStatus.REJECTED: "Bị từ chối",
}


def can_act(actor: Actor, goal: Goal, required_role: GoalRole) -> bool:
    """Single capability check: admins may always act."""
    if actor.is_admin:
        return True
    if required_role == GoalRole.CREATOR:
        return actor.employee_id == goal.created_by
    if required_role == GoalRole.APPROVER:
        return goal.current_approver is not None and actor.employee_id == goal.current_approver
    return False


def require_role(actor: Actor, goal: Goal, role: GoalRole) -> None:
    if not can_act(actor, goal, role):
        if role == GoalRole.CREATOR:
            raise AuthorizationError("Chỉ người tạo mục tiêu mới được thực hiện thao tác này")
        raise AuthorizationError("Bạn không phải người duyệt của mục tiêu này")


def _entry(action: GoalAction, actor: Actor, now: datetime, comment: Optional[str] = None) -> HistoryEntry:
    return HistoryEntry(action=action, by=actor.employee_id, date=now, comment=comment)


def _transition(goal: Goal, action: GoalAction, entries: Tuple[HistoryEntry, ...], **changes) -> Goal:
    target = TRANSITIONS.get((goal.status, action))
    if target is None:
        raise ValidationError(f"Không thể '{ACTION_LABELS[action]}' khi mục tiêu đang ở trạng thái '{STATUS_LABELS[goal.status]}'")

    updated = replace(goal, status=target, history=goal.history + entries, **changes)
    if updated.status in PENDING_STATUSES and updated.current_approver is None:
        raise ValidationError("Vui lòng chọn người duyệt trước khi gửi")
    return updated


def _with_approver(approver: Optional[Employee]) -> dict:
    if approver is None:
        return {}
    return {
        "current_approver": approver.employee_id,
        "owner_id": approver.employee_id,
        "owner_name": approver.full_name,
    }


def resume_action(goal: Goal) -> GoalAction:
    """Which submission a rejected goal re-enters with.

    Only the latest history entry counts: right after a second-stage
    rejection the goal resumes at pending2 with the same approver, anything
    else (including an edit made after the rejection) restarts at pending1.
    """
    if goal.last_action == GoalAction.REJECT2:
        return GoalAction.SUBMIT2
    return GoalAction.SUBMIT1


def create(actor: Actor, draft: GoalDraft, *, approver: Optional[Employee], now: datetime) -> Goal:
    title = require_non_empty(draft.title, "Tiêu đề")
    return Goal(
        goal_id=None,
        title=title,
        description=(draft.description or "").strip(),
        action_plan=(draft.action_plan or "").strip(),
        goal_level=draft.goal_level,
        deadline=draft.deadline,
        created_by=actor.employee_id,
        created_by_name=actor.name,
        status=GoalStatus.DRAFT,
        history=(_entry(GoalAction.CREATE, actor, now),),
        created_at=now,
        **_with_approver(approver),
    )


def edit(actor: Actor, goal: Goal, draft: GoalDraft, *, approver: Optional[Employee], now: datetime) -> Goal:
    require_role(actor, goal, GoalRole.CREATOR)
    if goal.status not in EDITABLE_STATUSES:
        raise ValidationError(f"Không thể chỉnh sửa khi mục tiêu đang ở trạng thái '{STATUS_LABELS[goal.status]}'")

    return replace(
        goal,
        title=require_non_empty(draft.title, "Tiêu đề"),
        description=(draft.description or "").strip(),
        action_plan=(draft.action_plan or "").strip(),
        goal_level=draft.goal_level,
        deadline=draft.deadline,
        history=goal.history + (_entry(GoalAction.EDIT, actor, now),),
        **_with_approver(approver),
    )


def check_deletable(actor: Actor, goal: Goal) -> None:
    require_role(actor, goal, GoalRole.CREATOR)
    if goal.status not in DELETABLE_STATUSES:
        raise ValidationError("Chỉ có thể xóa mục tiêu ở trạng thái nháp")


def submit(actor: Actor, goal: Goal, *, now: datetime) -> Goal:
    """submit1 from draft, or resubmission of a rejected goal."""
    require_role(actor, goal, GoalRole.CREATOR)
    if goal.status == GoalStatus.REJECTED:
        action = resume_action(goal)
    else:
        action = GoalAction.SUBMIT1
    return _transition(goal, action, (_entry(action, actor, now),))


def approve1(actor: Actor, goal: Goal, *, now: datetime) -> Goal:
    require_role(actor, goal, GoalRole.APPROVER)
    return _transition(goal, GoalAction.APPROVE1, (_entry(GoalAction.APPROVE1, actor, now),))


def reject1(actor: Actor, goal: Goal, *, comment: str, now: datetime) -> Goal:
    require_role(actor, goal, GoalRole.APPROVER)
    comment = require_non_empty(comment, "Lý do từ chối")
    return _transition(goal, GoalAction.REJECT1, (_entry(GoalAction.REJECT1, actor, now, comment),))


def evaluate(
    actor: Actor,
    goal: Goal,
    *,
    progress,
    grade: Optional[str],
    approver: Optional[Employee],
    now: datetime,
) -> Goal:
    """Self-evaluation after first approval; hands the goal to a second approver."""
    require_role(actor, goal, GoalRole.CREATOR)
    if goal.status != GoalStatus.APPROVED1:
        raise ValidationError("Chỉ được đánh giá mục tiêu đã duyệt cấp 1")
    progress = require_int_in_range(progress, "Tiến độ", MIN_PROGRESS, MAX_PROGRESS)
    if approver is None:
        raise ValidationError("Vui lòng chọn người duyệt cấp 2")

    grade = (grade or "").strip() or None
    note = f"Tiến độ {progress}%" + (f", xếp loại {grade}" if grade else "")
    entries = (
        _entry(GoalAction.EVALUATE, actor, now, note),
        _entry(GoalAction.SUBMIT2, actor, now),
    )
    return _transition(goal, GoalAction.SUBMIT2, entries, progress=progress, grade=grade, **_with_approver(approver))


def approve2(actor: Actor, goal: Goal, *, now: datetime) -> Goal:
    require_role(actor, goal, GoalRole.APPROVER)
    return _transition(goal, GoalAction.APPROVE2, (_entry(GoalAction.APPROVE2, actor, now),))


def reject2(actor: Actor, goal: Goal, *, comment: str, now: datetime) -> Goal:
    require_role(actor, goal, GoalRole.APPROVER)
    comment = require_non_empty(comment, "Lý do từ chối")
    return _transition(goal, GoalAction.REJECT2, (_entry(GoalAction.REJECT2, actor, now, comment),))
