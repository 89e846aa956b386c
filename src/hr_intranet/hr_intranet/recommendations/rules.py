"""Static rule table for dashboard recommendations.

Each rule looks at the pre-aggregated summaries only. A rule that fires
contributes one message with a fixed confidence; the dashboard shows the
strongest ones first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Sequence

from ..core.constants import MAX_RECOMMENDATIONS
from .model import Recommendation, WorkforceSummary

OVERTIME_HOURS_THRESHOLD = 20
LATE_DAYS_THRESHOLD = 3
LEAVE_BALANCE_THRESHOLD = 5
LOW_PROGRESS_THRESHOLD = 50


@dataclass(frozen=True)
class Rule:
    key: str
    title: str
    confidence: float
    applies: Callable[[WorkforceSummary], bool]
    describe: Callable[[WorkforceSummary], str]

    def evaluate(self, summary: WorkforceSummary) -> Recommendation:
        return Recommendation(key=self.key, title=self.title, description=self.describe(summary), confidence=self.confidence)


RULES: Sequence[Rule] = (
    Rule(
        key="pending_leave",
        title="Đơn nghỉ phép đang chờ duyệt",
        confidence=0.95,
        applies=lambda s: s.leave.pending > 0,
        describe=lambda s: f"Bạn có {s.leave.pending} đơn nghỉ phép chưa được duyệt. Hãy nhắc quản lý nếu cần gấp.",
    ),
    Rule(
        key="goals_awaiting_me",
        title="Mục tiêu chờ bạn duyệt",
        confidence=0.93,
        applies=lambda s: s.goals.awaiting_my_approval > 0,
        describe=lambda s: f"Có {s.goals.awaiting_my_approval} mục tiêu đang chờ bạn duyệt.",
    ),
    Rule(
        key="overtime",
        title="Làm thêm giờ nhiều",
        confidence=0.9,
        applies=lambda s: s.attendance.overtime_hours >= OVERTIME_HOURS_THRESHOLD,
        describe=lambda s: (
            f"Tháng này bạn đã làm thêm {s.attendance.overtime_hours:.1f} giờ. "
            "Hãy cân nhắc nghỉ bù để giữ sức khỏe."
        ),
    ),
    Rule(
        key="absences",
        title="Có ngày vắng mặt",
        confidence=0.82,
        applies=lambda s: s.attendance.absent_days > 0,
        describe=lambda s: f"Bạn có {s.attendance.absent_days} ngày vắng chưa có đơn nghỉ phép đi kèm.",
    ),
    Rule(
        key="late_arrivals",
        title="Đi muộn nhiều lần",
        confidence=0.8,
        applies=lambda s: s.attendance.late_days >= LATE_DAYS_THRESHOLD,
        describe=lambda s: f"Bạn đã đi muộn {s.attendance.late_days} lần trong tháng này.",
    ),
    Rule(
        key="rejected_goals",
        title="Mục tiêu bị từ chối",
        confidence=0.78,
        applies=lambda s: s.goals.rejected > 0,
        describe=lambda s: f"{s.goals.rejected} mục tiêu đã bị từ chối. Hãy chỉnh sửa và gửi lại.",
    ),
    Rule(
        key="overdue_goals",
        title="Mục tiêu quá hạn",
        confidence=0.76,
        applies=lambda s: s.goals.overdue > 0,
        describe=lambda s: f"{s.goals.overdue} mục tiêu đã quá hạn hoàn thành.",
    ),
    Rule(
        key="unconfirmed_attendance",
        title="Bảng công chưa xác nhận",
        confidence=0.72,
        applies=lambda s: s.attendance.unconfirmed_days > 0,
        describe=lambda s: f"Còn {s.attendance.unconfirmed_days} ngày công chưa được xác nhận trong tháng.",
    ),
    Rule(
        key="unread_payslips",
        title="Phiếu lương mới",
        confidence=0.7,
        applies=lambda s: s.payroll.unread_slips > 0,
        describe=lambda s: f"Bạn có {s.payroll.unread_slips} phiếu lương chưa xem.",
    ),
    Rule(
        key="no_goals",
        title="Chưa có mục tiêu",
        confidence=0.65,
        applies=lambda s: s.goals.total == 0,
        describe=lambda s: "Bạn chưa đặt mục tiêu nào. Hãy tạo mục tiêu đầu tiên cho kỳ này.",
    ),
    Rule(
        key="leave_balance",
        title="Còn nhiều ngày phép",
        confidence=0.6,
        applies=lambda s: s.leave.remaining_days >= LEAVE_BALANCE_THRESHOLD,
        describe=lambda s: f"Bạn còn {s.leave.remaining_days} ngày phép năm. Hãy lên kế hoạch nghỉ ngơi.",
    ),
    Rule(
        key="low_progress",
        title="Tiến độ mục tiêu thấp",
        confidence=0.55,
        applies=lambda s: s.goals.average_progress is not None and s.goals.average_progress < LOW_PROGRESS_THRESHOLD,
        describe=lambda s: f"Tiến độ trung bình các mục tiêu đã đánh giá là {s.goals.average_progress:.0f}%.",
    ),
)


def recommend(
    summary: WorkforceSummary,
    *,
    rules: Sequence[Rule] = RULES,
    limit: int = MAX_RECOMMENDATIONS,
) -> List[Recommendation]:
    fired = [rule.evaluate(summary) for rule in rules if rule.applies(summary)]
    fired.sort(key=lambda r: r.confidence, reverse=True)
    return fired[:limit]
