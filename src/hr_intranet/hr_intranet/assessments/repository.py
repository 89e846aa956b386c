from __future__ import annotations

from datetime import datetime
from typing import Mapping, Optional, Protocol, Sequence

from .model import TestSubmission


class SubmissionRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, submission_id: int) -> Optional[TestSubmission]:
        raise NotImplementedError

    def list_recent(self, *, limit: int = 200) -> Sequence[TestSubmission]:
        raise NotImplementedError
