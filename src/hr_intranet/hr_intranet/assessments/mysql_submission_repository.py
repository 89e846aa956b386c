from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TestSubmission
from .repository import SubmissionRepository


def _to_submission(row: Dict[str, Any], *, with_answers: bool) -> TestSubmission:
    return TestSubmission(
        submission_id=int(row["submission_id"]),
        candidate_name=row["candidate_name"],
        candidate_email=row.get("candidate_email"),
        score=float(row["score"]),
        submitted_at=row["submitted_at"],
        answers=json.loads(row.get("answers_json") or "{}") if with_answers else {},
        per_question_scores=json.loads(row.get("scores_json") or "{}") if with_answers else {},
    )


class MySQLSubmissionRepository(SubmissionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        candidate_name: str,
        candidate_email: Optional[str],
        answers: Mapping[str, str],
        per_question_scores: Mapping[str, float],
        score: float,
        submitted_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO test_submissions(
                    candidate_name, candidate_email, answers_json, scores_json, score, submitted_at
                )
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    candidate_name,
                    candidate_email,
                    json.dumps(dict(answers), ensure_ascii=False),
                    json.dumps(dict(per_question_scores)),
                    float(score),
                    submitted_at,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, submission_id: int) -> Optional[TestSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT submission_id, candidate_name, candidate_email,
                       answers_json, scores_json, score, submitted_at
                FROM test_submissions
                WHERE submission_id=%s
                """,
                (int(submission_id),),
            )
            row = fetchone(cur)
            return _to_submission(row, with_answers=True) if row else None

    def list_recent(self, *, limit: int = 200) -> Sequence[TestSubmission]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT submission_id, candidate_name, candidate_email, score, submitted_at
                FROM test_submissions
                ORDER BY submitted_at DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [_to_submission(r, with_answers=False) for r in fetchall(cur)]
