from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime

import pytest

from src.hr_intranet.hr_intranet.core.enums import GoalAction, GoalStatus, Role
from src.hr_intranet.hr_intranet.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.hr_intranet.hr_intranet.employees.model import Actor, Employee
from src.hr_intranet.hr_intranet.goals.model import GoalDraft
from src.hr_intranet.hr_intranet.goals.service import GoalService


def _employee(employee_id: int, name: str, role: Role = Role.STAFF, is_active: bool = True) -> Employee:
    return Employee(
        employee_id=employee_id,
        full_name=name,
        username=f"u{employee_id}",
        password_hash="x",
        role=role,
        is_active=is_active,
    )


E1 = _employee(1, "Nguyen Van A")
A1 = _employee(2, "Tran Thi B")
A2 = _employee(3, "Le Van C")
OUTSIDER = _employee(4, "Pham Van D")
RETIRED = _employee(5, "Vo Thi E", is_active=False)
ADMIN = _employee(9, "Admin Demo", Role.ADMIN)


class FakeEmployeesRepo:
    def __init__(self, employees):
        self._by_id = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id):
        return self._by_id.get(int(employee_id))

    def get_by_username(self, username):
        return next((e for e in self._by_id.values() if e.username == username), None)

    def list_active(self):
        return [e for e in self._by_id.values() if e.is_active]


class FakeGoalsRepo:
    def __init__(self):
        self._next_id = 1
        self.goals = {}
        self.saves = 0

    def get_by_id(self, goal_id):
        return self.goals.get(int(goal_id))

    def find(self, *, status=None, approver_id=None, created_by=None, limit=200):
        out = []
        for g in self.goals.values():
            if status is not None and g.status != status:
                continue
            if approver_id is not None and g.current_approver != approver_id:
                continue
            if created_by is not None and g.created_by != created_by:
                continue
            out.append(g)
        return out[:limit]

    def create(self, goal):
        gid = self._next_id
        self._next_id += 1
        self.goals[gid] = replace(goal, goal_id=gid)
        return gid

    def save(self, goal):
        if goal.goal_id not in self.goals:
            return False
        self.saves += 1
        self.goals[goal.goal_id] = goal
        return True

    def delete(self, goal_id):
        return self.goals.pop(int(goal_id), None) is not None


@pytest.fixture
def goals_repo():
    return FakeGoalsRepo()


@pytest.fixture
def service(goals_repo):
    employees = FakeEmployeesRepo([E1, A1, A2, OUTSIDER, RETIRED, ADMIN])
    return GoalService(goals_repo, employees, clock=lambda: datetime(2026, 3, 2, 9, 0, 0))


def _new_goal(service, approver_id=A1.employee_id, **draft_fields):
    draft = GoalDraft(title=draft_fields.pop("title", "Giảm thời gian xử lý ticket"), **draft_fields)
    return service.create_goal(Actor.from_employee(E1), draft, approver_id=approver_id)


def test_full_workflow_through_service(service, goals_repo):
    e1, a1, a2 = (Actor.from_employee(x) for x in (E1, A1, A2))
    gid = _new_goal(service)

    service.submit(e1, gid)
    service.approve(a1, gid, stage="1")
    service.evaluate(e1, gid, progress="90", grade="A", approver_id=str(A2.employee_id))
    g = service.approve(a2, gid, stage=2)

    assert g.status == GoalStatus.COMPLETED
    assert goals_repo.get_by_id(gid).status == GoalStatus.COMPLETED
    assert goals_repo.saves == 4


def test_refused_transition_saves_nothing(service, goals_repo, caplog):
    gid = _new_goal(service)
    service.submit(Actor.from_employee(E1), gid)
    before = goals_repo.get_by_id(gid)

    with caplog.at_level(logging.WARNING):
        with pytest.raises(AuthorizationError):
            service.approve(Actor.from_employee(OUTSIDER), gid, stage=1)

    assert goals_repo.get_by_id(gid) == before
    assert goals_repo.saves == 1
    assert "approve1 refused" in caplog.text


def test_stage_mismatch_is_validation_error(service):
    gid = _new_goal(service)
    service.submit(Actor.from_employee(E1), gid)
    with pytest.raises(ValidationError):
        service.approve(Actor.from_employee(A1), gid, stage=2)
    with pytest.raises(ValidationError):
        service.approve(Actor.from_employee(A1), gid, stage="x")
    with pytest.raises(ValidationError):
        service.reject(Actor.from_employee(A1), gid, stage=3, comment="no")


def test_reject_then_resubmit_through_service(service, goals_repo):
    e1, a1 = Actor.from_employee(E1), Actor.from_employee(A1)
    gid = _new_goal(service)
    service.submit(e1, gid)
    service.reject(a1, gid, stage=1, comment="Chưa rõ ràng")
    g = service.submit(e1, gid)

    assert g.status == GoalStatus.PENDING1
    assert [h.action for h in g.history][-3:] == [GoalAction.SUBMIT1, GoalAction.REJECT1, GoalAction.SUBMIT1]


def test_unknown_goal_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.submit(Actor.from_employee(E1), 404)
    with pytest.raises(NotFoundError):
        service.get_goal(Actor.from_employee(E1), 404)


@pytest.mark.parametrize("approver_id", [999, RETIRED.employee_id])
def test_unknown_or_inactive_approver_is_not_found(service, approver_id):
    with pytest.raises(NotFoundError):
        _new_goal(service, approver_id=approver_id)


def test_evaluate_requires_approver(service):
    e1 = Actor.from_employee(E1)
    gid = _new_goal(service)
    service.submit(e1, gid)
    service.approve(Actor.from_employee(A1), gid, stage=1)
    with pytest.raises(ValidationError):
        service.evaluate(e1, gid, progress=50, grade="B", approver_id=None)


def test_get_goal_visibility(service):
    gid = _new_goal(service)
    assert service.get_goal(Actor.from_employee(E1), gid).goal_id == gid
    assert service.get_goal(Actor.from_employee(A1), gid).goal_id == gid
    assert service.get_goal(Actor.from_employee(ADMIN), gid).goal_id == gid
    with pytest.raises(AuthorizationError):
        service.get_goal(Actor.from_employee(OUTSIDER), gid)


def test_list_for_splits_own_and_awaiting(service):
    e1, a1 = Actor.from_employee(E1), Actor.from_employee(A1)
    first = _new_goal(service)
    _new_goal(service, title="Mục tiêu nháp")
    service.submit(e1, first)

    mine = service.list_for(e1)
    assert len(mine.mine) == 2
    assert mine.awaiting_me == []

    theirs = service.list_for(a1)
    assert theirs.mine == []
    assert [g.goal_id for g in theirs.awaiting_me] == [first]


def test_delete_draft_only(service, goals_repo):
    e1 = Actor.from_employee(E1)
    draft_id = _new_goal(service)
    submitted_id = _new_goal(service)
    service.submit(e1, submitted_id)

    service.delete_goal(e1, draft_id)
    assert goals_repo.get_by_id(draft_id) is None

    with pytest.raises(ValidationError):
        service.delete_goal(e1, submitted_id)
    with pytest.raises(AuthorizationError):
        service.delete_goal(Actor.from_employee(OUTSIDER), submitted_id)


def test_edit_changes_fields_and_approver(service):
    e1 = Actor.from_employee(E1)
    gid = _new_goal(service)
    g = service.edit_goal(
        e1,
        gid,
        GoalDraft(title="Tiêu đề mới", deadline=date(2026, 6, 30)),
        approver_id=A2.employee_id,
    )
    assert g.title == "Tiêu đề mới"
    assert g.deadline == date(2026, 6, 30)
    assert g.current_approver == A2.employee_id
    assert g.history[-1].action == GoalAction.EDIT


def test_approver_choices_exclude_actor_and_inactive(service):
    ids = {e.employee_id for e in service.approver_choices(Actor.from_employee(E1))}
    assert E1.employee_id not in ids
    assert RETIRED.employee_id not in ids
    assert A1.employee_id in ids


def test_history_ui_uses_names_and_labels(service):
    e1 = Actor.from_employee(E1)
    gid = _new_goal(service)
    g = service.submit(e1, gid)

    rows = service.history_ui(g)
    assert [r["action"] for r in rows] == ["create", "submit1"]
    assert rows[1]["label"] == "Gửi duyệt cấp 1"
    assert rows[1]["by"] == E1.full_name
    assert rows[1]["date"] == "2026-03-02 09:00"


def _approved1(service) -> int:
    gid = _new_goal(service)
    service.submit(Actor.from_employee(E1), gid)
    service.approve(Actor.from_employee(A1), gid, stage=1)
    return gid


@pytest.mark.parametrize("approver_id", [None, 999, A2.employee_id])
def test_outsider_evaluate_is_refused_before_approver_lookup(service, goals_repo, approver_id):
    gid = _approved1(service)
    before = goals_repo.get_by_id(gid)

    with pytest.raises(AuthorizationError):
        service.evaluate(Actor.from_employee(OUTSIDER), gid, progress=80, grade="B", approver_id=approver_id)

    after = goals_repo.get_by_id(gid)
    assert after.status == GoalStatus.APPROVED1
    assert len(after.history) == len(before.history)


@pytest.mark.parametrize("approver_id", [None, 999])
def test_outsider_edit_is_refused_before_approver_lookup(service, goals_repo, approver_id):
    gid = _new_goal(service)
    saves = goals_repo.saves

    with pytest.raises(AuthorizationError):
        service.edit_goal(Actor.from_employee(OUTSIDER), gid, GoalDraft(title="Chiếm quyền"), approver_id=approver_id)

    assert goals_repo.saves == saves
    assert goals_repo.get_by_id(gid).title == "Giảm thời gian xử lý ticket"


def test_creator_with_unknown_approver_still_gets_not_found(service):
    gid = _approved1(service)
    with pytest.raises(NotFoundError):
        service.evaluate(Actor.from_employee(E1), gid, progress=80, grade="B", approver_id=999)


@pytest.mark.parametrize("stage", [1, 2])
def test_outsider_reject_is_refused_and_state_unchanged(service, goals_repo, stage):
    e1 = Actor.from_employee(E1)
    gid = _new_goal(service)
    service.submit(e1, gid)
    if stage == 2:
        service.approve(Actor.from_employee(A1), gid, stage=1)
        service.evaluate(e1, gid, progress=70, grade="B", approver_id=A2.employee_id)
    before = goals_repo.get_by_id(gid)

    with pytest.raises(AuthorizationError):
        service.reject(Actor.from_employee(OUTSIDER), gid, stage=stage, comment="Không đạt")

    after = goals_repo.get_by_id(gid)
    assert after.status == before.status
    assert len(after.history) == len(before.history)


def test_resubmit_after_reject2_and_edit_restarts_first_stage(service):
    e1, a2 = Actor.from_employee(E1), Actor.from_employee(A2)
    gid = _approved1(service)
    service.evaluate(e1, gid, progress=60, grade="C", approver_id=A2.employee_id)
    service.reject(a2, gid, stage=2, comment="Bổ sung minh chứng")
    service.edit_goal(e1, gid, GoalDraft(title="Bản sửa"))

    g = service.submit(e1, gid)
    assert g.status == GoalStatus.PENDING1
