from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import GoalAction, GoalLevel, GoalStatus


@dataclass(frozen=True)
class HistoryEntry:
    """Một bản ghi lịch sử (audit) bất biến."""

    action: GoalAction
    by: int
    date: datetime
    comment: Optional[str] = None


@dataclass(frozen=True)
class GoalDraft:
    """Descriptive fields supplied by the author on create/edit."""

    title: str
    description: str = ""
    action_plan: str = ""
    goal_level: GoalLevel = GoalLevel.MEDIUM
    deadline: Optional[date] = None


@dataclass(frozen=True)
class Goal:
    """Thực thể miền (domain): Mục tiêu cần duyệt hai cấp.

    `owner_id`/`owner_name` cache the current approver and always move
    together with `current_approver`. `history` is a tuple so an entry can
    only be added by building a new Goal.
    """

    goal_id: Optional[int]
    title: str
    description: str
    action_plan: str
    goal_level: GoalLevel
    created_by: int
    created_by_name: str
    status: GoalStatus = GoalStatus.DRAFT
    current_approver: Optional[int] = None
    owner_id: Optional[int] = None
    owner_name: Optional[str] = None
    progress: Optional[int] = None
    grade: Optional[str] = None
    deadline: Optional[date] = None
    history: Tuple[HistoryEntry, ...] = field(default_factory=tuple)
    created_at: Optional[datetime] = None

    @property
    def last_action(self) -> Optional[GoalAction]:
        return self.history[-1].action if self.history else None

    def is_overdue(self, today: date) -> bool:
        return (
            self.deadline is not None
            and self.deadline < today
            and self.status not in {GoalStatus.COMPLETED, GoalStatus.REJECTED}
        )
