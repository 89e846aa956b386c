from __future__ import annotations

from datetime import date

from ..core.constants import ANNUAL_LEAVE_DAYS
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import AttendanceSummary, LeaveSummary, PayrollSummary
from .repository import SummaryRepository


class MySQLSummaryRepository(SummaryRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, annual_leave_days: int = ANNUAL_LEAVE_DAYS):
        self._conn_factory = conn_factory
        self._annual_leave_days = int(annual_leave_days)

    def attendance_summary(self, *, employee_id: int, start_date: date, end_date: date) -> AttendanceSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COALESCE(SUM(status <> 'ABSENT'), 0) AS worked_days,
                    COALESCE(SUM(status = 'LATE'), 0) AS late_days,
                    COALESCE(SUM(status = 'ABSENT'), 0) AS absent_days,
                    COALESCE(SUM(overtime_minutes), 0) AS overtime_minutes,
                    COALESCE(SUM(confirmed = 0), 0) AS unconfirmed_days
                FROM attendance
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                """,
                (int(employee_id), start_date, end_date),
            )
            r = fetchone(cur) or {}
            return AttendanceSummary(
                worked_days=int(r.get("worked_days") or 0),
                late_days=int(r.get("late_days") or 0),
                absent_days=int(r.get("absent_days") or 0),
                overtime_hours=round(int(r.get("overtime_minutes") or 0) / 60, 1),
                unconfirmed_days=int(r.get("unconfirmed_days") or 0),
            )

    def leave_summary(self, *, employee_id: int, year: int) -> LeaveSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COALESCE(SUM(status = 'PENDING'), 0) AS pending,
                    COALESCE(SUM(CASE WHEN status = 'APPROVED'
                                      THEN DATEDIFF(end_date, start_date) + 1 ELSE 0 END), 0) AS approved_days
                FROM leave_requests
                WHERE employee_id=%s AND YEAR(start_date)=%s
                """,
                (int(employee_id), int(year)),
            )
            r = fetchone(cur) or {}
            approved_days = int(r.get("approved_days") or 0)
            return LeaveSummary(
                pending=int(r.get("pending") or 0),
                approved_days=approved_days,
                remaining_days=max(0, self._annual_leave_days - approved_days),
            )

    def payroll_summary(self, *, employee_id: int, year: int) -> PayrollSummary:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    COUNT(*) AS slips_this_year,
                    COALESCE(SUM(read_at IS NULL), 0) AS unread_slips
                FROM payroll_slips
                WHERE employee_id=%s AND published=1 AND LEFT(period, 4)=%s
                """,
                (int(employee_id), str(int(year))),
            )
            r = fetchone(cur) or {}
            return PayrollSummary(
                slips_this_year=int(r.get("slips_this_year") or 0),
                unread_slips=int(r.get("unread_slips") or 0),
            )
