from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "hr_intranet")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes and '--' comments).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    lines = [ln for ln in sql.splitlines() if not ln.lstrip().startswith("--")]
    for ch in "\n".join(lines):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql_file(db_config: dict, path: str | Path) -> int:
    target = _as_target(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        count = 0
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
        return count
    finally:
        conn.close()


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _exec_sql_file(db_config, schema_path)
    logger.info("Applied %d schema statements from %s", count, schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _exec_sql_file(db_config, seed_path)
    logger.info("Applied %d seed statements from %s", count, seed_path)


def ensure_demo_employees(db_config: dict) -> None:
    """Create or refresh the demo accounts used on a fresh install."""
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def dept_id(name: str) -> int:
            cur.execute("SELECT dept_id AS id FROM departments WHERE dept_name=%s", (name,))
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing departments row for dept_name={name}")
            return int(row["id"])

        def upsert_employee(full_name: str, username: str, password: str, role: str, dept: int) -> None:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT employee_id FROM employees WHERE username=%s", (username,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE employees
                    SET full_name=%s, password_hash=%s, role=%s, dept_id=%s, is_active=1
                    WHERE username=%s
                    """,
                    (full_name, password_hash, role, dept, username),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO employees (full_name, username, password_hash, role, dept_id)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (full_name, username, password_hash, role, dept),
                )

        dept_it = dept_id("IT")
        dept_hr = dept_id("HR")

        upsert_employee("Admin Demo", "admin", "admin123", "admin", dept_it)
        upsert_employee("Nguyễn Văn A", "nguyenvana", "staff123", "staff", dept_hr)
        upsert_employee("Trần Thị B", "tranthib", "staff123", "staff", dept_hr)
        upsert_employee("Lê Văn C", "levanc", "staff123", "staff", dept_it)

        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
