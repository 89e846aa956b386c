from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Vai trò nhân viên dùng cho phân quyền."""

    ADMIN = "admin"
    STAFF = "staff"


class GoalStatus(str, Enum):
    """Trạng thái của mục tiêu trong luồng duyệt hai cấp."""

    DRAFT = "draft"
    PENDING1 = "pending1"
    APPROVED1 = "approved1"
    PENDING2 = "pending2"
    COMPLETED = "completed"
    REJECTED = "rejected"


class GoalAction(str, Enum):
    """Hành động được ghi vào lịch sử (audit trail) của mục tiêu."""

    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    EVALUATE = "evaluate"
    SUBMIT1 = "submit1"
    APPROVE1 = "approve1"
    REJECT1 = "reject1"
    SUBMIT2 = "submit2"
    APPROVE2 = "approve2"
    REJECT2 = "reject2"


class GoalLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class GoalRole(str, Enum):
    """Who a workflow step must be performed by."""

    CREATOR = "creator"
    APPROVER = "approver"


class QuestionKind(str, Enum):
    INTERVIEW = "interview"
    CODE = "code"
