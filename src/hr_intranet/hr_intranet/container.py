from __future__ import annotations

from dataclasses import dataclass

from .assessments.mysql_submission_repository import MySQLSubmissionRepository
from .assessments.service import AssessmentService
from .core.constants import ANNUAL_LEAVE_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import AuthService
from .goals.mysql_goal_repository import MySQLGoalRepository
from .goals.service import GoalService
from .recommendations.mysql_summary_repository import MySQLSummaryRepository
from .recommendations.service import RecommendationService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    employees_repo: MySQLEmployeeRepository
    goals_repo: MySQLGoalRepository
    summaries_repo: MySQLSummaryRepository
    submissions_repo: MySQLSubmissionRepository

    auth_service: AuthService
    goal_service: GoalService
    recommendation_service: RecommendationService
    assessment_service: AssessmentService


def build_container(*, db_config: dict, annual_leave_days: int = ANNUAL_LEAVE_DAYS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    goals_repo = MySQLGoalRepository(conn)
    summaries_repo = MySQLSummaryRepository(conn, annual_leave_days=annual_leave_days)
    submissions_repo = MySQLSubmissionRepository(conn)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        goals_repo=goals_repo,
        summaries_repo=summaries_repo,
        submissions_repo=submissions_repo,
        auth_service=AuthService(employees_repo),
        goal_service=GoalService(goals_repo, employees_repo),
        recommendation_service=RecommendationService(summaries_repo, goals_repo),
        assessment_service=AssessmentService(submissions_repo),
    )
