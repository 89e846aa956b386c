from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model: tổng hợp chấm công của nhân viên trong kỳ."""

    worked_days: int = 0
    late_days: int = 0
    absent_days: int = 0
    overtime_hours: float = 0.0
    unconfirmed_days: int = 0


@dataclass(frozen=True)
class GoalSummary:
    total: int = 0
    drafts: int = 0
    in_review: int = 0
    rejected: int = 0
    completed: int = 0
    overdue: int = 0
    awaiting_my_approval: int = 0
    average_progress: Optional[float] = None


@dataclass(frozen=True)
class LeaveSummary:
    pending: int = 0
    approved_days: int = 0
    remaining_days: int = 0


@dataclass(frozen=True)
class PayrollSummary:
    slips_this_year: int = 0
    unread_slips: int = 0


@dataclass(frozen=True)
class WorkforceSummary:
    attendance: AttendanceSummary
    goals: GoalSummary
    leave: LeaveSummary
    payroll: PayrollSummary


@dataclass(frozen=True)
class Recommendation:
    key: str
    title: str
    description: str
    confidence: float
