from __future__ import annotations

from pathlib import Path

from src.hr_intranet.hr_intranet.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_split_respects_quotes_and_comments():
    sql = """
    -- departments
    INSERT INTO departments (dept_name) VALUES ('IT; HR');
    INSERT INTO departments (dept_name) VALUES ("Kế toán");
    SELECT 1
    """
    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO departments (dept_name) VALUES ('IT; HR')",
        'INSERT INTO departments (dept_name) VALUES ("Kế toán")',
        "SELECT 1",
    ]


def test_create_database_and_use_are_stripped():
    sql = "CREATE DATABASE IF NOT EXISTS other;\nUSE other;\nSELECT 1;"
    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["SELECT 1"]


def test_schema_declares_every_table():
    statements = list(_iter_sql_statements(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8"))))
    text = "\n".join(statements)
    for table in (
        "departments",
        "employees",
        "goals",
        "goal_history",
        "attendance",
        "leave_requests",
        "payroll_slips",
        "test_submissions",
    ):
        assert f"CREATE TABLE IF NOT EXISTS {table}" in text or f"CREATE TABLE IF NOT EXISTS `{table}`" in text
