from __future__ import annotations

from datetime import datetime

import pytest

from src.hr_intranet.hr_intranet.core.enums import GoalAction, GoalRole, GoalStatus, Role
from src.hr_intranet.hr_intranet.core.exceptions import AuthorizationError, ValidationError
from src.hr_intranet.hr_intranet.employees.model import Actor, Employee
from src.hr_intranet.hr_intranet.goals import workflow
from src.hr_intranet.hr_intranet.goals.model import GoalDraft

NOW = datetime(2026, 3, 2, 9, 0, 0)


def _employee(employee_id: int, name: str, role: Role = Role.STAFF) -> Employee:
    return Employee(employee_id=employee_id, full_name=name, username=f"u{employee_id}", password_hash="x", role=role)


E1 = _employee(1, "Nguyen Van A")
A1 = _employee(2, "Tran Thi B")
A2 = _employee(3, "Le Van C")
OUTSIDER = _employee(4, "Pham Van D")
ADMIN = _employee(9, "Admin Demo", Role.ADMIN)


def actor(e: Employee) -> Actor:
    return Actor.from_employee(e)


def _draft_goal(approver: Employee | None = A1):
    return workflow.create(actor(E1), GoalDraft(title="Hoàn thành module báo cáo"), approver=approver, now=NOW)


def _approved1_goal():
    g = workflow.submit(actor(E1), _draft_goal(), now=NOW)
    return workflow.approve1(actor(A1), g, now=NOW)


def _pending2_goal():
    return workflow.evaluate(actor(E1), _approved1_goal(), progress=80, grade="A", approver=A2, now=NOW)


def _actions(goal):
    return [h.action for h in goal.history]


def test_create_starts_as_draft_with_create_entry():
    g = _draft_goal()

    assert g.status == GoalStatus.DRAFT
    assert g.created_by == E1.employee_id
    assert g.created_by_name == E1.full_name
    assert g.current_approver == A1.employee_id
    assert g.owner_id == A1.employee_id and g.owner_name == A1.full_name
    assert _actions(g) == [GoalAction.CREATE]


def test_create_requires_title():
    with pytest.raises(ValidationError):
        workflow.create(actor(E1), GoalDraft(title="   "), approver=A1, now=NOW)


def test_happy_path_two_stage_approval():
    g = _draft_goal()
    g = workflow.submit(actor(E1), g, now=NOW)
    assert g.status == GoalStatus.PENDING1

    g = workflow.approve1(actor(A1), g, now=NOW)
    assert g.status == GoalStatus.APPROVED1

    g = workflow.evaluate(actor(E1), g, progress=80, grade="A", approver=A2, now=NOW)
    assert g.status == GoalStatus.PENDING2
    assert g.current_approver == A2.employee_id
    assert g.owner_id == A2.employee_id and g.owner_name == A2.full_name
    assert g.progress == 80 and g.grade == "A"

    g = workflow.approve2(actor(A2), g, now=NOW)
    assert g.status == GoalStatus.COMPLETED
    assert _actions(g) == [
        GoalAction.CREATE,
        GoalAction.SUBMIT1,
        GoalAction.APPROVE1,
        GoalAction.EVALUATE,
        GoalAction.SUBMIT2,
        GoalAction.APPROVE2,
    ]
    assert g.history[3].comment == "Tiến độ 80%, xếp loại A"


def test_reject1_then_resubmit_goes_back_to_pending1():
    g = workflow.submit(actor(E1), _draft_goal(), now=NOW)
    g = workflow.reject1(actor(A1), g, comment="Thiếu kế hoạch", now=NOW)
    assert g.status == GoalStatus.REJECTED
    assert g.history[-1].comment == "Thiếu kế hoạch"

    g = workflow.submit(actor(E1), g, now=NOW)
    assert g.status == GoalStatus.PENDING1
    assert g.current_approver == A1.employee_id
    assert g.last_action == GoalAction.SUBMIT1


def test_reject2_then_resubmit_resumes_at_pending2_with_same_approver():
    g = workflow.reject2(actor(A2), _pending2_goal(), comment="Chưa đủ bằng chứng", now=NOW)
    assert g.status == GoalStatus.REJECTED

    g = workflow.submit(actor(E1), g, now=NOW)
    assert g.status == GoalStatus.PENDING2
    assert g.current_approver == A2.employee_id
    assert g.last_action == GoalAction.SUBMIT2


def test_resume_stage_follows_latest_history_entry_only():
    g = workflow.reject2(actor(A2), _pending2_goal(), comment="Sửa lại", now=NOW)
    assert workflow.resume_action(g) == GoalAction.SUBMIT2

    g = workflow.edit(actor(E1), g, GoalDraft(title="Tiêu đề mới"), approver=None, now=NOW)
    assert g.last_action == GoalAction.EDIT
    assert workflow.resume_action(g) == GoalAction.SUBMIT1

    g = workflow.submit(actor(E1), g, now=NOW)
    assert g.status == GoalStatus.PENDING1
    assert g.last_action == GoalAction.SUBMIT1


def test_non_approver_cannot_approve_and_goal_is_unchanged():
    g = workflow.submit(actor(E1), _draft_goal(), now=NOW)
    before = g

    with pytest.raises(AuthorizationError):
        workflow.approve1(actor(OUTSIDER), g, now=NOW)

    assert g == before
    assert g.status == GoalStatus.PENDING1
    assert len(g.history) == 2


@pytest.mark.parametrize(
    "build,step",
    [
        (
            lambda: workflow.submit(actor(E1), _draft_goal(), now=NOW),
            lambda g: workflow.reject1(actor(OUTSIDER), g, comment="Không đạt", now=NOW),
        ),
        (
            _pending2_goal,
            lambda g: workflow.reject2(actor(OUTSIDER), g, comment="Không đạt", now=NOW),
        ),
        (
            _approved1_goal,
            lambda g: workflow.evaluate(actor(OUTSIDER), g, progress=80, grade="B", approver=A2, now=NOW),
        ),
        (
            _approved1_goal,
            lambda g: workflow.evaluate(actor(OUTSIDER), g, progress=None, grade="", approver=None, now=NOW),
        ),
    ],
)
def test_outsider_cannot_reject_or_evaluate(build, step):
    g = build()

    with pytest.raises(AuthorizationError):
        step(g)

    assert g.status in {GoalStatus.PENDING1, GoalStatus.PENDING2, GoalStatus.APPROVED1}
    assert g == build()


def test_creator_cannot_approve_own_goal_unless_approver():
    g = workflow.submit(actor(E1), _draft_goal(), now=NOW)
    with pytest.raises(AuthorizationError):
        workflow.approve1(actor(E1), g, now=NOW)


def test_admin_bypasses_role_checks():
    g = workflow.submit(actor(ADMIN), _draft_goal(), now=NOW)
    g = workflow.approve1(actor(ADMIN), g, now=NOW)
    assert g.status == GoalStatus.APPROVED1
    assert g.history[-1].by == ADMIN.employee_id


def test_admin_cannot_skip_status_guards():
    with pytest.raises(ValidationError):
        workflow.approve2(actor(ADMIN), _draft_goal(), now=NOW)


def test_non_creator_cannot_submit_or_edit():
    g = _draft_goal()
    with pytest.raises(AuthorizationError):
        workflow.submit(actor(A1), g, now=NOW)
    with pytest.raises(AuthorizationError):
        workflow.edit(actor(A1), g, GoalDraft(title="x"), approver=None, now=NOW)


def test_authorization_is_checked_before_status():
    # completed goal, wrong actor: the caller learns about permissions, not state
    g = workflow.approve2(actor(A2), _pending2_goal(), now=NOW)
    with pytest.raises(AuthorizationError):
        workflow.approve2(actor(OUTSIDER), g, now=NOW)


def test_reject_requires_comment():
    g = workflow.submit(actor(E1), _draft_goal(), now=NOW)
    with pytest.raises(ValidationError):
        workflow.reject1(actor(A1), g, comment="  ", now=NOW)
    with pytest.raises(ValidationError):
        workflow.reject2(actor(A2), _pending2_goal(), comment="", now=NOW)


def test_submit_without_approver_is_refused():
    g = _draft_goal(approver=None)
    with pytest.raises(ValidationError):
        workflow.submit(actor(E1), g, now=NOW)


@pytest.mark.parametrize("progress", [-1, 101, "abc", None, "", 55.5])
def test_evaluate_rejects_bad_progress(progress):
    with pytest.raises(ValidationError):
        workflow.evaluate(actor(E1), _approved1_goal(), progress=progress, grade="B", approver=A2, now=NOW)


def test_evaluate_accepts_progress_from_form_text():
    g = workflow.evaluate(actor(E1), _approved1_goal(), progress="100", grade="", approver=A2, now=NOW)
    assert g.progress == 100
    assert g.grade is None
    assert g.history[-2].comment == "Tiến độ 100%"


def test_evaluate_requires_second_approver():
    with pytest.raises(ValidationError):
        workflow.evaluate(actor(E1), _approved1_goal(), progress=50, grade="B", approver=None, now=NOW)


def test_evaluate_only_after_first_approval():
    with pytest.raises(ValidationError):
        workflow.evaluate(actor(E1), _draft_goal(), progress=50, grade="B", approver=A2, now=NOW)


@pytest.mark.parametrize("status_builder", [lambda: workflow.submit(actor(E1), _draft_goal(), now=NOW), _pending2_goal])
def test_edit_refused_while_pending(status_builder):
    with pytest.raises(ValidationError):
        workflow.edit(actor(E1), status_builder(), GoalDraft(title="x"), approver=None, now=NOW)


def test_edit_allowed_after_first_approval_and_keeps_status():
    g = workflow.edit(actor(E1), _approved1_goal(), GoalDraft(title="Đổi tên"), approver=None, now=NOW)
    assert g.status == GoalStatus.APPROVED1
    assert g.title == "Đổi tên"
    assert g.current_approver == A1.employee_id


def test_delete_only_for_drafts():
    workflow.check_deletable(actor(E1), _draft_goal())
    with pytest.raises(ValidationError):
        workflow.check_deletable(actor(E1), _approved1_goal())
    with pytest.raises(AuthorizationError):
        workflow.check_deletable(actor(OUTSIDER), _draft_goal())


def test_history_is_append_only_across_transitions():
    g = _draft_goal()
    steps = [
        lambda x: workflow.submit(actor(E1), x, now=NOW),
        lambda x: workflow.reject1(actor(A1), x, comment="Làm lại", now=NOW),
        lambda x: workflow.submit(actor(E1), x, now=NOW),
        lambda x: workflow.approve1(actor(A1), x, now=NOW),
    ]
    for step in steps:
        nxt = step(g)
        assert nxt.history[: len(g.history)] == g.history
        assert len(nxt.history) > len(g.history)
        g = nxt


def test_pending_goal_always_has_approver():
    for g in (workflow.submit(actor(E1), _draft_goal(), now=NOW), _pending2_goal()):
        assert g.status in workflow.PENDING_STATUSES
        assert g.current_approver is not None


def test_can_act_roles():
    g = _draft_goal()
    assert workflow.can_act(actor(E1), g, GoalRole.CREATOR)
    assert not workflow.can_act(actor(E1), g, GoalRole.APPROVER)
    assert workflow.can_act(actor(A1), g, GoalRole.APPROVER)
    assert not workflow.can_act(actor(OUTSIDER), g, GoalRole.CREATOR)
    assert workflow.can_act(actor(ADMIN), g, GoalRole.APPROVER)


def test_can_act_without_approver():
    g = _draft_goal(approver=None)
    assert not workflow.can_act(actor(A1), g, GoalRole.APPROVER)


def test_every_action_and_status_has_a_label():
    assert set(workflow.ACTION_LABELS) == set(GoalAction)
    assert set(workflow.STATUS_LABELS) == set(GoalStatus)
