from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import GoalStatus
from .model import Goal


class GoalRepository(Protocol):
    """Persistence for goals and their history.

    `save` must only ever append the history entries the stored record does
    not have yet; stored entries are never rewritten.
    """

    def get_by_id(self, goal_id: int) -> Optional[Goal]:
        raise NotImplementedError

    def find(
        self,
        *,
        status: Optional[GoalStatus] = None,
        approver_id: Optional[int] = None,
        created_by: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[Goal]:
        raise NotImplementedError

    def create(self, goal: Goal) -> int:
        raise NotImplementedError

    def save(self, goal: Goal) -> bool:
        raise NotImplementedError

    def delete(self, goal_id: int) -> bool:
        raise NotImplementedError
