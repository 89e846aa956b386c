from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence

from ..core.enums import GoalStatus
from ..employees.model import Actor
from ..goals.model import Goal
from ..goals.repository import GoalRepository
from .model import GoalSummary, Recommendation, WorkforceSummary
from .repository import SummaryRepository
from .rules import recommend

_IN_REVIEW = {GoalStatus.PENDING1, GoalStatus.APPROVED1, GoalStatus.PENDING2}


@dataclass(frozen=True)
class Dashboard:
    summary: WorkforceSummary
    recommendations: List[Recommendation]


def summarize_goals(own: Sequence[Goal], *, awaiting_my_approval: int, today: date) -> GoalSummary:
    evaluated = [g.progress for g in own if g.progress is not None]
    return GoalSummary(
        total=len(own),
        drafts=sum(1 for g in own if g.status == GoalStatus.DRAFT),
        in_review=sum(1 for g in own if g.status in _IN_REVIEW),
        rejected=sum(1 for g in own if g.status == GoalStatus.REJECTED),
        completed=sum(1 for g in own if g.status == GoalStatus.COMPLETED),
        overdue=sum(1 for g in own if g.is_overdue(today)),
        awaiting_my_approval=awaiting_my_approval,
        average_progress=(sum(evaluated) / len(evaluated)) if evaluated else None,
    )


class RecommendationService:
    def __init__(self, summaries: SummaryRepository, goals: GoalRepository):
        self._summaries = summaries
        self._goals = goals

    def for_employee(self, actor: Actor, *, today: Optional[date] = None) -> Dashboard:
        today = today or date.today()
        month_start = today.replace(day=1)

        own = self._goals.find(created_by=actor.employee_id)
        awaiting = sum(
            len(self._goals.find(status=status, approver_id=actor.employee_id))
            for status in (GoalStatus.PENDING1, GoalStatus.PENDING2)
        )

        summary = WorkforceSummary(
            attendance=self._summaries.attendance_summary(
                employee_id=actor.employee_id, start_date=month_start, end_date=today
            ),
            goals=summarize_goals(own, awaiting_my_approval=awaiting, today=today),
            leave=self._summaries.leave_summary(employee_id=actor.employee_id, year=today.year),
            payroll=self._summaries.payroll_summary(employee_id=actor.employee_id, year=today.year),
        )
        return Dashboard(summary=summary, recommendations=recommend(summary))
