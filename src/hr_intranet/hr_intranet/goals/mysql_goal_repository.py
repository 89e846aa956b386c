from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from ..core.enums import GoalAction, GoalLevel, GoalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Goal, HistoryEntry
from .repository import GoalRepository

_GOAL_COLUMNS = """
    goal_id, title, description, action_plan, goal_level, status,
    created_by, created_by_name, current_approver, owner_id, owner_name,
    progress, grade, deadline, created_at
"""


def _to_goal(row: Dict[str, Any], history: List[HistoryEntry]) -> Goal:
    return Goal(
        goal_id=int(row["goal_id"]),
        title=row["title"],
        description=row.get("description") or "",
        action_plan=row.get("action_plan") or "",
        goal_level=GoalLevel(row["goal_level"]),
        status=GoalStatus(row["status"]),
        created_by=int(row["created_by"]),
        created_by_name=row.get("created_by_name") or "",
        current_approver=row.get("current_approver"),
        owner_id=row.get("owner_id"),
        owner_name=row.get("owner_name"),
        progress=row.get("progress"),
        grade=row.get("grade"),
        deadline=row.get("deadline"),
        history=tuple(history),
        created_at=row.get("created_at"),
    )


def _to_entry(row: Dict[str, Any]) -> HistoryEntry:
    return HistoryEntry(
        action=GoalAction(row["action"]),
        by=int(row["by_employee_id"]),
        date=row["acted_at"],
        comment=row.get("comment"),
    )


class MySQLGoalRepository(GoalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _load_history(cur, goal_ids: Sequence[int]) -> Dict[int, List[HistoryEntry]]:
        out: Dict[int, List[HistoryEntry]] = {int(g): [] for g in goal_ids}
        if not goal_ids:
            return out
        placeholders = ",".join(["%s"] * len(goal_ids))
        cur.execute(
            f"""
            SELECT goal_id, seq, action, by_employee_id, acted_at, comment
            FROM goal_history
            WHERE goal_id IN ({placeholders})
            ORDER BY goal_id, seq
            """,
            tuple(int(g) for g in goal_ids),
        )
        for r in fetchall(cur):
            out[int(r["goal_id"])].append(_to_entry(r))
        return out

    @staticmethod
    def _append_history(cur, goal_id: int, history: Sequence[HistoryEntry], start: int) -> None:
        for seq in range(start, len(history)):
            entry = history[seq]
            cur.execute(
                """
                INSERT INTO goal_history(goal_id, seq, action, by_employee_id, acted_at, comment)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(goal_id), seq, entry.action.value, int(entry.by), entry.date, entry.comment),
            )

    def get_by_id(self, goal_id: int) -> Optional[Goal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_GOAL_COLUMNS} FROM goals WHERE goal_id=%s", (int(goal_id),))
            row = fetchone(cur)
            if not row:
                return None
            history = self._load_history(cur, [int(row["goal_id"])])
            return _to_goal(row, history[int(row["goal_id"])])

    def find(
        self,
        *,
        status: Optional[GoalStatus] = None,
        approver_id: Optional[int] = None,
        created_by: Optional[int] = None,
        limit: int = 200,
    ) -> Sequence[Goal]:
        clauses = ["1=1"]
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if approver_id is not None:
            clauses.append("current_approver=%s")
            params.append(int(approver_id))
        if created_by is not None:
            clauses.append("created_by=%s")
            params.append(int(created_by))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_GOAL_COLUMNS}
                FROM goals
                WHERE {where}
                ORDER BY created_at DESC, goal_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            rows = fetchall(cur)
            history = self._load_history(cur, [int(r["goal_id"]) for r in rows])
            return [_to_goal(r, history[int(r["goal_id"])]) for r in rows]

    def create(self, goal: Goal) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO goals(
                    title, description, action_plan, goal_level, status,
                    created_by, created_by_name, current_approver, owner_id, owner_name,
                    progress, grade, deadline, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    goal.title,
                    goal.description,
                    goal.action_plan,
                    goal.goal_level.value,
                    goal.status.value,
                    int(goal.created_by),
                    goal.created_by_name,
                    goal.current_approver,
                    goal.owner_id,
                    goal.owner_name,
                    goal.progress,
                    goal.grade,
                    goal.deadline,
                    goal.created_at,
                ),
            )
            goal_id = int(cur.lastrowid)
            self._append_history(cur, goal_id, goal.history, 0)
            return goal_id

    def save(self, goal: Goal) -> bool:
        if goal.goal_id is None:
            raise ValueError("Cannot save a goal that was never created")

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE goals
                SET title=%s, description=%s, action_plan=%s, goal_level=%s, status=%s,
                    current_approver=%s, owner_id=%s, owner_name=%s,
                    progress=%s, grade=%s, deadline=%s
                WHERE goal_id=%s
                """,
                (
                    goal.title,
                    goal.description,
                    goal.action_plan,
                    goal.goal_level.value,
                    goal.status.value,
                    goal.current_approver,
                    goal.owner_id,
                    goal.owner_name,
                    goal.progress,
                    goal.grade,
                    goal.deadline,
                    int(goal.goal_id),
                ),
            )
            if cur.rowcount == 0:
                cur.execute("SELECT 1 AS found FROM goals WHERE goal_id=%s", (int(goal.goal_id),))
                if not fetchone(cur):
                    return False

            cur.execute("SELECT COUNT(*) AS n FROM goal_history WHERE goal_id=%s", (int(goal.goal_id),))
            stored = int((fetchone(cur) or {}).get("n", 0))
            self._append_history(cur, int(goal.goal_id), goal.history, stored)
            return True

    def delete(self, goal_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM goal_history WHERE goal_id=%s", (int(goal_id),))
            cur.execute("DELETE FROM goals WHERE goal_id=%s", (int(goal_id),))
            return cur.rowcount > 0
