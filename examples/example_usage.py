"""Ví dụ: dùng service layer (không qua Flask).

Liệt kê các mục tiêu đang chờ một nhân viên duyệt và gợi ý trên bảng điều khiển.
"""

import importlib

from config import get_settings_module

from src.hr_intranet.hr_intranet.container import build_container
from src.hr_intranet.hr_intranet.employees.model import Actor


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    employee = container.employees_repo.get_by_username("tranthib")
    if employee is None:
        print("Chưa có dữ liệu demo, hãy chạy scripts/seed_db.py")
        return

    actor = Actor.from_employee(employee)
    for goal in container.goal_service.list_for(actor).awaiting_me:
        print(goal.goal_id, goal.status.value, goal.title)

    for rec in container.recommendation_service.for_employee(actor).recommendations:
        print(f"[{rec.confidence:.2f}] {rec.title}: {rec.description}")


if __name__ == "__main__":
    main()
