from __future__ import annotations

from datetime import date
from typing import Protocol

from .model import AttendanceSummary, LeaveSummary, PayrollSummary


class SummaryRepository(Protocol):
    """Aggregate queries feeding the recommendation rules."""

    def attendance_summary(self, *, employee_id: int, start_date: date, end_date: date) -> AttendanceSummary:
        raise NotImplementedError

    def leave_summary(self, *, employee_id: int, year: int) -> LeaveSummary:
        raise NotImplementedError

    def payroll_summary(self, *, employee_id: int, year: int) -> PayrollSummary:
        raise NotImplementedError
