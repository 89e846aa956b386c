from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional


@dataclass(frozen=True)
class TestSubmission:
    """Bài làm kiểm tra đầu vào của ứng viên đã được chấm."""

    __test__ = False

    submission_id: int
    candidate_name: str
    score: float
    submitted_at: datetime
    candidate_email: Optional[str] = None
    answers: Dict[str, str] = field(default_factory=dict)
    per_question_scores: Dict[str, float] = field(default_factory=dict)
