from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping, Optional, Sequence, Tuple

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_LIST_LIMIT
from ..core.exceptions import AuthorizationError, NotFoundError
from ..employees.model import Actor
from .grader import GradeResult, grade_answers
from .model import TestSubmission
from .questions import QUESTIONS, Question
from .repository import SubmissionRepository

logger = logging.getLogger(__name__)


class AssessmentService:
    """Use case: candidates take the pre-employment test, admins review it."""

    def __init__(
        self,
        submissions: SubmissionRepository,
        *,
        questions: Sequence[Question] = QUESTIONS,
        clock: Callable[[], datetime] = now_local,
    ):
        self._submissions = submissions
        self._questions = questions
        self._clock = clock

    @property
    def questions(self) -> Sequence[Question]:
        return self._questions

    def submit(
        self,
        *,
        candidate_name: str,
        answers: Mapping[str, Optional[str]],
        candidate_email: Optional[str] = None,
    ) -> Tuple[int, GradeResult]:
        name = require_non_empty(candidate_name, "Họ tên ứng viên")
        known = {q.key for q in self._questions}
        cleaned = {k: (v or "") for k, v in answers.items() if k in known}

        result = grade_answers(cleaned, questions=self._questions)
        submission_id = self._submissions.create(
            candidate_name=name,
            candidate_email=optional_text(candidate_email),
            answers=cleaned,
            per_question_scores=result.per_question_scores,
            score=result.score,
            submitted_at=self._clock(),
        )
        logger.info("Test submission %s graded: %.2f/%d", submission_id, result.score, len(self._questions))
        return submission_id, result

    def list_submissions(self, actor: Actor) -> Sequence[TestSubmission]:
        if not actor.is_admin:
            raise AuthorizationError("Bạn không có quyền")
        return self._submissions.list_recent(limit=DEFAULT_LIST_LIMIT)

    def get_submission(self, actor: Actor, submission_id: int) -> TestSubmission:
        if not actor.is_admin:
            raise AuthorizationError("Bạn không có quyền")
        submission = self._submissions.get_by_id(int(submission_id))
        if not submission:
            raise NotFoundError("Bài làm không tồn tại")
        return submission
