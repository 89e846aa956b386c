from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence

from ..core.constants import TEST_MAX_SCORE
from ..core.enums import QuestionKind
from .questions import QUESTIONS, Question


@dataclass(frozen=True)
class GradeResult:
    score: float
    per_question_scores: Dict[str, float]


def grade_interview(question: Question, answer: str) -> float:
    """Share of expected keywords mentioned in the answer, at most 1.0."""
    if not question.keywords:
        return 0.0
    text = answer.lower()
    found = sum(1 for k in question.keywords if k in text)
    return min(1.0, found / len(question.keywords))


def grade_code(question: Question, answer: str) -> float:
    matches = sum(1 for p in question.patterns if p.search(answer))
    if matches >= 2:
        return 1.0
    if matches == 1:
        return 0.5
    return 0.0


def grade_question(question: Question, answer: Optional[str]) -> float:
    if not answer or not answer.strip():
        return 0.0
    if question.kind == QuestionKind.INTERVIEW:
        return grade_interview(question, answer)
    if question.kind == QuestionKind.CODE:
        return grade_code(question, answer)
    raise ValueError(f"Unsupported question kind: {question.kind!r}")


def grade_answers(answers: Mapping[str, Optional[str]], *, questions: Sequence[Question] = QUESTIONS) -> GradeResult:
    per_question = {q.key: round(grade_question(q, answers.get(q.key)), 2) for q in questions}
    total = min(TEST_MAX_SCORE, sum(per_question.values()))
    return GradeResult(score=round(total, 2), per_question_scores=per_question)
